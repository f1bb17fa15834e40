from django.contrib import admin
from .models import Todo


@admin.register(Todo)
class TodoAdmin(admin.ModelAdmin):
    list_display = ['task', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['task']
    readonly_fields = ['id', 'created_at']

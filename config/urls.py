"""
URL configuration for the todo app.
"""
from django.contrib import admin
from django.urls import path
from ninja import NinjaAPI

from apps.todos.api import router as todos_router
from apps.todos.services import StoreError
from apps.todos import views

api = NinjaAPI(
    title="Todo API",
    version="1.0.0",
    description="Create, list, complete and delete todos",
    docs_url="/docs",
)

api.add_router("/todos", todos_router)


@api.exception_handler(StoreError)
def store_unavailable(request, exc: StoreError):
    return api.create_response(request, {"detail": "Task store unavailable"}, status=503)


@api.get("/health", tags=["Health"])
def health(request):
    return {"status": "healthy"}


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
    path('', views.home, name='home'),
    path('todos/create', views.create_todo, name='todo-create'),
    path('todos/<uuid:todo_id>/status', views.set_todo_status, name='todo-status'),
    path('todos/<uuid:todo_id>/delete', views.delete_todo, name='todo-delete'),
]

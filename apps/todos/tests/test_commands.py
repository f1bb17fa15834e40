from io import StringIO
from django.core.management import call_command
from django.test import TestCase

from apps.todos.models import Todo


class SeedTodosCommandTest(TestCase):

    def test_seed(self):
        out = StringIO()
        call_command('seed_todos', '--count', '6', stdout=out)
        self.assertEqual(Todo.objects.count(), 6)
        self.assertEqual(Todo.objects.filter(status=True).count(), 2)
        self.assertIn('Successfully created 6 todos', out.getvalue())

    def test_clean(self):
        Todo.objects.create(task='Old')
        call_command('seed_todos', '--count', '2', '--clean', stdout=StringIO())
        self.assertEqual(Todo.objects.count(), 2)
        self.assertFalse(Todo.objects.filter(task='Old').exists())

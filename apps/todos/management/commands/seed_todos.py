from django.core.management.base import BaseCommand
from apps.todos.models import Todo
from apps.todos.dtos import TodoIn
from apps.todos.services import TaskStore

SAMPLE_TASKS = [
    "Buy milk",
    "Water the plants",
    "Book dentist appointment",
    "Renew library card",
    "Call the landlord about the heater",
    "Back up laptop",
    "Return the borrowed ladder",
    "Plan weekend hike",
]


class Command(BaseCommand):
    help = 'Seeds the database with sample todos'

    def add_arguments(self, parser):
        parser.add_argument(
            '--count',
            type=int,
            default=len(SAMPLE_TASKS),
            help='Number of todos to create',
        )
        parser.add_argument(
            '--clean',
            action='store_true',
            help='Delete existing todos before seeding',
        )
        parser.add_argument(
            '--database',
            default='default',
            help='Database alias to seed',
        )

    def handle(self, *args, **options):
        store = TaskStore(using=options['database'])

        if options['clean']:
            deleted, _ = Todo.objects.using(store.using).all().delete()
            self.stdout.write(f'Deleted {deleted} existing todos')

        count = options['count']
        for i in range(count):
            text = SAMPLE_TASKS[i % len(SAMPLE_TASKS)]
            todo = store.create_todo(TodoIn(task=text))
            # Every third sample starts out completed
            if i % 3 == 2:
                store.set_status(todo.id, True)

        self.stdout.write(self.style.SUCCESS(f'Successfully created {count} todos'))

import logging
from django.conf import settings
from django.db import DEFAULT_DB_ALIAS
from django.utils.deprecation import MiddlewareMixin

from .services import TaskStore

logger = logging.getLogger(__name__)


class TaskStoreMiddleware(MiddlewareMixin):
    """
    Builds the TaskStore once at process start and hands it to every
    request as `request.task_store`.
    The database alias comes from settings.TODO_DATABASE.
    """

    def __init__(self, get_response):
        super().__init__(get_response)
        alias = getattr(settings, 'TODO_DATABASE', DEFAULT_DB_ALIAS)
        self.store = TaskStore(using=alias)
        logger.info(f"Task store ready on database '{alias}'")

    def process_request(self, request):
        request.task_store = self.store

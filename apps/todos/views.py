"""
Server-rendered todo page.

Every view builds a TodoClient for the duration of the request and
drives the UI components with it; the components talk to the API over
HTTP like any other client would.
"""
import logging
from functools import lru_cache
from uuid import UUID

import httpx
from django.conf import settings
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect
from django.views.decorators.http import require_GET, require_POST

from .client import TodoClient, ValidationError
from .components import HomePage, TodoCard

logger = logging.getLogger(__name__)

# Host used for in-process API calls; must be in ALLOWED_HOSTS
LOCAL_API_URL = "http://localhost/api/"


@lru_cache(maxsize=1)
def _local_wsgi_app():
    from django.core.wsgi import get_wsgi_application
    return get_wsgi_application()


def get_todo_client() -> TodoClient:
    """
    Client for the todo API: settings.TODO_API_URL when set, otherwise
    this process's own API through an in-process WSGI transport.
    """
    if settings.TODO_API_URL:
        return TodoClient.connect(settings.TODO_API_URL)
    return TodoClient.connect(LOCAL_API_URL, transport=httpx.WSGITransport(app=_local_wsgi_app()))


def _render_page(request: HttpRequest, page: HomePage, status: int = 200) -> HttpResponse:
    return HttpResponse(page.render(request), status=status)


def _find_card(page: HomePage, todo_id: UUID) -> TodoCard:
    card = page.task_list.card_for(todo_id)
    if card is None:
        raise Http404("Todo not found")
    return card


@require_GET
def home(request: HttpRequest):
    """Render the page. `?edit=<id>` opens that card in edit mode."""
    with get_todo_client() as client:
        page = HomePage(client)
        page.task_list.load()

        edit_id = request.GET.get('edit')
        if edit_id:
            try:
                card = page.task_list.card_for(UUID(edit_id))
            except ValueError:
                card = None
            if card:
                card.start_editing()

        return _render_page(request, page)


@require_POST
def create_todo(request: HttpRequest):
    """
    Create from the submitted draft. A rejected or failed create
    re-renders the page with the draft still in the form.
    """
    with get_todo_client() as client:
        page = HomePage(client, draft=request.POST.get('task', ''))
        if not page.form.can_submit:
            logger.info("Ignoring create with blank task text")
            return redirect('home')

        page.form.submit()
        if page.form.mutation.is_error:
            page.task_list.load()
            status = 422 if isinstance(page.form.mutation.error, ValidationError) else 503
            return _render_page(request, page, status=status)
    return redirect('home')


@require_POST
def set_todo_status(request: HttpRequest, todo_id: UUID):
    status = request.POST.get('status', '').lower() == 'true'
    with get_todo_client() as client:
        page = HomePage(client)
        if page.task_list.load().is_error:
            return _render_page(request, page, status=503)
        _find_card(page, todo_id).set_status(status)
    return redirect('home')


@require_POST
def delete_todo(request: HttpRequest, todo_id: UUID):
    with get_todo_client() as client:
        page = HomePage(client)
        if page.task_list.load().is_error:
            return _render_page(request, page, status=503)
        _find_card(page, todo_id).delete()
    return redirect('home')

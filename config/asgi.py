"""
ASGI config for the todo app.

`application` serves ASGI servers (Uvicorn, Daphne); `lambda_handler`
serves the same app behind API Gateway on AWS Lambda.
"""
import os

from django.core.asgi import get_asgi_application
from mangum import Mangum

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_asgi_application()

lambda_handler = Mangum(application, lifespan="off")

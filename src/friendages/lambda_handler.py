"""
AWS Lambda entry point.

Wraps the FastAPI application with the Mangum adapter so API Gateway events
reach the GraphQL endpoint. The collection is created once per execution
environment and reused across invocations.
"""

from mangum import Mangum

from .api.app import create_app

app = create_app()

handler = Mangum(app, lifespan="off")

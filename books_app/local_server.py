"""
Local development server for the Books sample.

Stands in for CloudFront + the edge relay + the Function URLs: each
operation path is mapped to its Lambda handler, the operation segment is
stripped exactly as the relay does, and the handler receives a Function URL
(payload 2.0) event. The single-page app in frontend/ is served at "/".

Usage:
    TABLE_NAME=books-dev uvicorn books_app.local_server:app --reload

Set DYNAMODB_ENDPOINT_URL to use DynamoDB Local instead of AWS.
"""

import base64
import logging
import os
from typing import Any, Callable, Dict

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from lambdas.books import handler as books
from lambdas.edge_auth.auth import strip_behavior_path

# Load environment variables
load_dotenv()

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FRONTEND_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "frontend")

LambdaHandler = Callable[[Dict[str, Any], Any], Dict[str, Any]]


async def build_event(request: Request) -> Dict[str, Any]:
    """Build the Function URL event the relay would deliver for this request."""
    raw_path = strip_behavior_path(request.url.path)
    body = await request.body()

    event: Dict[str, Any] = {
        "version": "2.0",
        "routeKey": "$default",
        "rawPath": raw_path,
        "rawQueryString": request.url.query,
        "headers": dict(request.headers),
        "requestContext": {
            "http": {
                "method": request.method,
                "path": raw_path,
                "sourceIp": request.client.host if request.client else "",
                "userAgent": request.headers.get("user-agent", ""),
            },
        },
        "isBase64Encoded": False,
    }
    if request.query_params:
        event["queryStringParameters"] = dict(request.query_params)
    if body:
        try:
            event["body"] = body.decode("utf-8")
        except UnicodeDecodeError:
            event["body"] = base64.b64encode(body).decode("ascii")
            event["isBase64Encoded"] = True
    return event


async def invoke(handler: LambdaHandler, request: Request) -> Response:
    """Run a Lambda handler for the request and convert its result."""
    event = await build_event(request)
    # Handlers make blocking boto3 calls
    result = await run_in_threadpool(handler, event, None)
    return Response(
        content=result.get("body"),
        status_code=result["statusCode"],
        headers=result.get("headers"),
    )


def create_app(frontend_path: str = FRONTEND_PATH) -> FastAPI:
    """
    Create the local server app.

    Args:
        frontend_path: Directory with index.html and app.js (skipped if missing)
    """
    app = FastAPI(title="Books Local", version="0.1.0")

    # CORS for a frontend served from another port
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/getBook/{book_id}")
    async def get_book(book_id: str, request: Request):
        return await invoke(books.get_book_handler, request)

    @app.get("/getBooks")
    async def get_books(request: Request):
        return await invoke(books.get_books_handler, request)

    @app.api_route("/createBook", methods=["POST", "OPTIONS"])
    async def create_book(request: Request):
        return await invoke(books.create_book_handler, request)

    @app.api_route("/updateBook/{book_id}", methods=["PUT", "OPTIONS"])
    async def update_book(book_id: str, request: Request):
        return await invoke(books.update_book_handler, request)

    @app.api_route("/deleteBook/{book_id}", methods=["DELETE", "OPTIONS"])
    async def delete_book(book_id: str, request: Request):
        return await invoke(books.delete_book_handler, request)

    # Mount the single-page app last so the API paths win
    if os.path.isdir(frontend_path):
        app.mount("/", StaticFiles(directory=frontend_path, html=True), name="frontend")
    else:
        logger.warning(f"Frontend directory not found: {frontend_path}")

    return app


app = create_app()

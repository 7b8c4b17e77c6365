"""
FastAPI webhook application for the hookrelay service.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .analysis import evaluate_push
from .config import RelayConfig, get_config
from .dispatch import build_dispatch_request, trigger_dispatch
from .models import Evaluation, Outcome, PushPayload, utc_timestamp
from .signature import verify_signature


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


SIGNATURE_HEADER = 'X-Hub-Signature-256'
EVENT_HEADER = 'X-GitHub-Event'


PLAIN_RESPONSES = {
    Outcome.IGNORED: (200, 'Event ignored'),
    Outcome.AUTH_FAILED: (401, 'Unauthorized'),
    Outcome.MALFORMED: (500, 'Internal Server Error'),
}


async def app_startup(app: FastAPI) -> None:
    """
    Startup event handler for the app
    """

    try:
        config = get_config()
    except Exception as e:
        logger.error(f'Failed to load configuration: {e}', exc_info=True)
        raise

    app.state.config = config
    app.state.http_client = httpx.AsyncClient(timeout=config.dispatch_timeout)

    logger.info(f'Listening on port {config.port}')
    logger.info(f'Upstream repository: {config.upstream_repo}')
    logger.info(f'Dispatch repository: {config.target_repo}')
    logger.info(f'Webhook secret: {"configured" if config.webhook_secret else "not configured"}')
    logger.info(f'GitHub token: {"configured" if config.github_token else "not configured"}')


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """
    Lifespan event handler for the app
    """

    logger.info('Starting up...')

    await app_startup(app)

    try:
        yield
    finally:
        logger.info('Shutting down...')
        await app.state.http_client.aclose()


app = FastAPI(lifespan=app_lifespan, docs_url=None, redoc_url=None, openapi_url=None)


@app.exception_handler(StarletteHTTPException)
async def http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Render framework errors, such as 405 for a non-POST request, as
    plain text
    """

    return PlainTextResponse(str(exc.detail), status_code=exc.status_code,
                             headers=exc.headers)


def evaluate_delivery(
        config: RelayConfig,
        event: Optional[str],
        body: bytes,
        signature: Optional[str]) -> Evaluation:
    """
    Authenticate and evaluate a single webhook delivery. The body is
    only parsed once its signature has been verified, and only push
    events reach the analyzer.
    """

    if not signature or not verify_signature(body, config.webhook_secret, signature):
        logger.error('Webhook signature verification failed')
        return Evaluation(outcome=Outcome.AUTH_FAILED, reason='invalid signature')

    # pydantic's ValidationError is also a ValueError
    try:
        data = json.loads(body)
        logger.info(f'Received GitHub event: {event}')

        if event != 'push':
            logger.info(f'Ignoring event type: {event}')
            return Evaluation(outcome=Outcome.IGNORED, reason=f'event type {event}')

        payload = PushPayload.model_validate(data)

    except ValueError as e:
        logger.error(f'Failed to process webhook: {e}')
        return Evaluation(outcome=Outcome.MALFORMED, reason=str(e))

    return evaluate_push(payload, config)


@app.post('/{path:path}')
async def webhook(request: Request) -> Response:
    """
    Receive a webhook delivery and relay accepted pushes as a
    repository dispatch
    """

    config: RelayConfig = request.app.state.config

    try:
        body = await request.body()
        evaluation = evaluate_delivery(
            config,
            event=request.headers.get(EVENT_HEADER),
            body=body,
            signature=request.headers.get(SIGNATURE_HEADER),
        )

        if evaluation.outcome is not Outcome.ACCEPTED:
            status_code, text = PLAIN_RESPONSES[evaluation.outcome]
            return PlainTextResponse(text, status_code=status_code)

        dispatch = build_dispatch_request(evaluation.latest_commit, evaluation.analysis)
        dispatched = await trigger_dispatch(config, dispatch, request.app.state.http_client)

    except Exception as e:
        logger.error(f'Failed to process webhook: {e}', exc_info=True)
        status_code, text = PLAIN_RESPONSES[Outcome.MALFORMED]
        return PlainTextResponse(text, status_code=status_code)

    if dispatched:
        logger.info(f'Sync triggered for {dispatch.client_payload.upstream_commit}, '
                    f'{len(dispatch.client_payload.changed_files)} files affected')
        message = 'Sync triggered'
    else:
        logger.error('Sync trigger failed')
        message = 'Sync trigger failed'

    return JSONResponse({
        'success': True,
        'message': message,
        'timestamp': utc_timestamp(),
        'dispatched': dispatched,
    })


# The end.

"""
Repository dispatch trigger for the hookrelay service.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging
from typing import Optional

import httpx

from .config import RelayConfig
from .models import ChangeAnalysis, ClientPayload, Commit, DispatchRequest


logger = logging.getLogger(__name__)


def build_dispatch_request(commit: Commit, analysis: ChangeAnalysis) -> DispatchRequest:
    """
    Build the dispatch request announcing commit and the files changed
    across its push.
    """

    return DispatchRequest(
        client_payload=ClientPayload(
            upstream_commit=commit.id,
            commit_message=commit.message,
            changed_files=list(analysis.changed_files),
        ),
    )


async def _post_dispatch(
        client: httpx.AsyncClient,
        config: RelayConfig,
        dispatch: DispatchRequest) -> None:

    headers = {
        'Authorization': f'Bearer {config.github_token}',
        'Accept': 'application/vnd.github+json',
    }

    r = await client.post(
        config.dispatch_url,
        headers=headers,
        json=dispatch.model_dump(),
        timeout=config.dispatch_timeout,
    )
    r.raise_for_status()


async def trigger_dispatch(
        config: RelayConfig,
        dispatch: DispatchRequest,
        client: Optional[httpx.AsyncClient] = None) -> bool:
    """
    Send a repository dispatch to the configured target repository.

    Makes a single attempt, using client if one is given or a
    short-lived client otherwise. Returns True when the dispatch was
    accepted, and False when no token is configured or the call fails
    for any reason. Failures are logged, never raised.
    """

    commit_id = dispatch.client_payload.upstream_commit

    if not config.github_token:
        logger.error(f'No GitHub token configured, cannot dispatch {commit_id}')
        return False

    logger.info(f'Triggering dispatch to {config.target_repo} for {commit_id}')

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.dispatch_timeout) as client:
                await _post_dispatch(client, config, dispatch)
        else:
            await _post_dispatch(client, config, dispatch)

    except httpx.HTTPStatusError as e:
        logger.error(f'Dispatch for {commit_id} rejected with status {e.response.status_code}')
        return False

    except Exception as e:
        logger.error(f'Dispatch for {commit_id} failed: {e!r}', exc_info=True)
        return False

    logger.info(f'Dispatch triggered for {commit_id}')
    return True


# The end.

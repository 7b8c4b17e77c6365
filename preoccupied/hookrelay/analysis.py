"""
Relevance filtering and commit analysis for push events.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging
from typing import Dict, Sequence, Tuple

from .config import RelayConfig
from .models import (
    ChangeAnalysis, ChangeTypes, Commit, Evaluation, FileCounts,
    Outcome, PushPayload,
)


logger = logging.getLogger(__name__)


TARGET_REF = 'refs/heads/main'


# Checked in order, first match wins. Anything else is 'other'.
CHANGE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('feature', ('feat', 'feature', 'add', '新增')),
    ('bugfix', ('fix', 'bug', '修复')),
    ('doc', ('doc', 'readme', '文档')),
    ('config', ('config', '配置')),
)


def classify_commit(message: str) -> str:
    """
    Classify a commit message as one of feature, bugfix, doc, config,
    or other, by case-insensitive keyword substring.
    """

    message = message.lower()
    for change_type, keywords in CHANGE_KEYWORDS:
        if any(kw in message for kw in keywords):
            return change_type
    return 'other'


def analyze_changes(commits: Sequence[Commit]) -> ChangeAnalysis:
    """
    Summarize file counts, commit classifications, and the set of
    touched paths across commits.
    """

    counts = FileCounts()
    tally: Dict[str, int] = dict.fromkeys(ChangeTypes.model_fields, 0)

    # dict keeps first-seen order
    changed: Dict[str, None] = {}

    for commit in commits:
        tally[classify_commit(commit.message)] += 1

        for paths in (commit.added, commit.modified, commit.removed):
            changed.update(dict.fromkeys(paths))

        counts.added += len(commit.added)
        counts.modified += len(commit.modified)
        counts.removed += len(commit.removed)

    return ChangeAnalysis(
        total_changes=counts,
        change_types=ChangeTypes(**tally),
        changed_files=list(changed),
        commit_count=len(commits),
    )


def _log_analysis(analysis: ChangeAnalysis, latest: Commit) -> None:
    totals = analysis.total_changes
    types = analysis.change_types

    logger.info('Detected upstream changes:')
    logger.info(f'  - commits: {analysis.commit_count}')
    logger.info(f'  - changed files: {len(analysis.changed_files)}')
    logger.info(f'  - added: {totals.added}, modified: {totals.modified}, removed: {totals.removed}')
    logger.info(f'  - features: {types.feature}, bugfixes: {types.bugfix}, docs: {types.doc}'
                f', config: {types.config}, other: {types.other}')
    logger.info(f'Latest commit: {latest.id[:8]} - {latest.message}')


def _ignored(reason: str) -> Evaluation:
    logger.warning(f'Ignoring push: {reason}')
    return Evaluation(outcome=Outcome.IGNORED, reason=reason)


def evaluate_push(payload: PushPayload, config: RelayConfig) -> Evaluation:
    """
    Decide whether a push warrants a dispatch, and if so analyze it.

    Pushes to any repository other than the configured upstream, to
    any ref other than main, or without commits are IGNORED. Anything
    else is ACCEPTED along with its analysis and the last commit of
    the push, as ordered by the provider.
    """

    full_name = payload.repository.full_name
    if full_name != config.upstream_repo:
        return _ignored(f'repository {full_name} is not {config.upstream_repo}')

    if payload.ref != TARGET_REF:
        return _ignored(f'ref {payload.ref} is not {TARGET_REF}')

    if not payload.commits:
        return _ignored('no commits in push event')

    analysis = analyze_changes(payload.commits)
    latest = payload.commits[-1]
    _log_analysis(analysis, latest)

    return Evaluation(
        outcome=Outcome.ACCEPTED,
        analysis=analysis,
        latest_commit=latest,
    )


# The end.

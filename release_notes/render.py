# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging

import release_notes.model as rnm

logger = logging.getLogger(__name__)

# max. amount of codepoints accepted by GitHub for release-bodies (determined empirically)
RELEASE_BODY_LIMIT = 125000


def render_pull_request(pull_request: rnm.PullRequest) -> str:
    login = pull_request.user.login if pull_request.user else ''
    return f'- {pull_request.title} by @{login} in {pull_request.html_url}\n'


def render_changelog(pulls: collections.abc.Iterable[rnm.PullRequest]) -> str:
    '''
    renders one markdown-list-item per pull-request (in given order). Each line is terminated by a
    newline; an empty changelog is rendered as empty string.
    '''
    return ''.join(render_pull_request(pr) for pr in pulls)


def body_or_replacement(
    body: str,
    replacement: str='changelog was too large (limit: {limit} / actual: {actual})',
    limit: int=RELEASE_BODY_LIMIT,
) -> tuple[str, bool]:
    '''
    checks whether given body is short enough to be accepted by GitHub as release-body. If so,
    body is returned as first element of returned tuple, else the formatted replacement.

    The second element indicates whether the original body was returned.
    '''
    if len(body) <= limit:
        return body, True

    logger.warning(f'changelog exceeds {limit=} ({len(body)=}), will use replacement')
    return replacement.format(
        limit=limit,
        actual=len(body),
    ), False

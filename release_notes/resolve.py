# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging

import release_notes.errors as rne
import release_notes.gateway as rng
import release_notes.model as rnm

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 30
DEFAULT_MAX_PAGES = 100


class ReleasePages:
    '''
    lazy, restartable iterable over pages of releases as listed by GitHub (most recent first).

    Pages are requested on demand, starting at page 1. Iteration stops at the first empty page.
    If `max_pages` pages were consumed w/o reaching an empty page, `PaginationLimitExceeded` is
    raised (GitHub is expected to eventually return an empty page).
    '''
    def __init__(
        self,
        gateway: rng.RepositoryGateway,
        page_size: int=DEFAULT_PAGE_SIZE,
        max_pages: int=DEFAULT_MAX_PAGES,
    ):
        self.gateway = gateway
        self.page_size = page_size
        self.max_pages = max_pages

    def __iter__(self) -> collections.abc.Generator[list[rnm.Release], None, None]:
        for page in range(1, self.max_pages + 1):
            releases = self.gateway.list_releases(
                page=page,
                page_size=self.page_size,
            )
            if not releases:
                logger.debug(f'reached end of release-list at {page=}')
                return

            yield releases

        raise rne.PaginationLimitExceeded(
            f'release-list did not end after {self.max_pages=} ({self.page_size=})'
        )


def find_previous_release(
    tag: str,
    release_pages: collections.abc.Iterable[collections.abc.Sequence[rnm.Release]],
) -> rnm.Release | None:
    '''
    returns the first release from `release_pages` that belongs to the same release-line as
    `tag` (see `release_notes.model.in_release_line`), skipping the release for `tag` itself.
    Returns `None` if there is no such release (which is expected for the first release of a
    release-line).
    '''
    prefix = rnm.tag_prefix(tag)

    for releases in release_pages:
        for release in releases:
            if release.tag_name == tag:
                continue
            if rnm.in_release_line(release.tag_name, prefix):
                return release

    return None


def resolve_previous_release(
    gateway: rng.RepositoryGateway,
    tag: str,
    page_size: int=DEFAULT_PAGE_SIZE,
    max_pages: int=DEFAULT_MAX_PAGES,
) -> rnm.Release | None:
    '''
    like `find_previous_release`, but lists releases through `gateway`. A release-list that is not
    found is treated like an empty one (the changelog then starts at the beginning of history).
    '''
    try:
        previous_release = find_previous_release(
            tag=tag,
            release_pages=ReleasePages(
                gateway=gateway,
                page_size=page_size,
                max_pages=max_pages,
            ),
        )
    except rne.NotFound as nf:
        logger.info(f'release-list not found ({nf}); assuming there is no previous release')
        return None

    if previous_release:
        logger.info(f'previous release for {tag=}: {previous_release.tag_name}')
    else:
        logger.info(f'no previous release found for {tag=} ({rnm.tag_prefix(tag)=})')

    return previous_release

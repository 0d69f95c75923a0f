# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging

import release_notes.errors as rne
import release_notes.gateway as rng
import release_notes.model as rnm

logger = logging.getLogger(__name__)


class ReleaseUpserter:
    '''
    creates or updates the GitHub-release for a tag.

    Creation and update are separate steps: the release is retrieved (or created w/o body) first,
    as its target-commitish (and the tag itself, if it did not exist before) is needed to determine
    the release's changelog. The final update always carries over id and target-commitish of the
    retrieved (or created) release. draft- and prerelease-flags are always set to `False`.
    '''
    def __init__(
        self,
        gateway: rng.RepositoryGateway,
    ):
        self.gateway = gateway

    def find_or_create(
        self,
        tag: str,
        name: str | None=None,
    ) -> tuple[rnm.Release, bool]:
        '''
        returns a two-tuple of the release for `tag`, and a boolean indicating whether the release
        was created. Only `NotFound` leads to creation; any other error is propagated.
        '''
        try:
            release = self.gateway.get_release(tag)
            logger.info(f'found existing release for {tag=} ({release.id=})')
            return release, False
        except rne.NotFound:
            logger.info(f'no release exists for {tag=}, will create it')

        release = self.gateway.create_release(
            rnm.ReleaseRequest(
                tag_name=tag,
                name=name or tag,
                draft=False,
                prerelease=False,
            ),
        )
        logger.info(f'created release for {tag=} ({release.id=}, {release.target_commitish=})')
        return release, True

    def update(
        self,
        release: rnm.Release,
        body: str,
        name: str | None=None,
    ) -> rnm.Release:
        updated_release = self.gateway.update_release(
            rnm.ReleaseUpdate.for_release(
                release=release,
                name=name or release.tag_name,
                body=body,
            ),
        )
        logger.info(f'updated release {updated_release.tag_name} ({updated_release.id=})')
        return updated_release

# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import logging

import release_notes.collect as rnc
import release_notes.config as rncfg
import release_notes.gateway as rng
import release_notes.model as rnm
import release_notes.render as rnrender
import release_notes.resolve as rnr
import release_notes.upsert as rnu

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ReleaseNotesResult:
    release: rnm.Release
    created: bool
    previous_release: rnm.Release | None
    commit_range: rnm.CommitRange
    pull_requests: tuple[rnm.PullRequest, ...]
    changelog: str


def publish_release_notes(
    gateway: rng.RepositoryGateway,
    cfg: rncfg.ReleaseNotesConfig,
) -> ReleaseNotesResult:
    '''
    creates (if absent) the release for `cfg.tag`, and sets its body to a changelog listing all
    pull-requests (labelled w/ `cfg.label`, if set) merged since the previous release of the same
    release-line.

    Any error is propagated; no release is modified if an error occurs before the final update.
    '''
    upserter = rnu.ReleaseUpserter(gateway=gateway)

    release, created = upserter.find_or_create(
        tag=cfg.tag,
        name=cfg.effective_release_name,
    )

    previous_release = rnr.resolve_previous_release(
        gateway=gateway,
        tag=cfg.tag,
        page_size=cfg.page_size,
        max_pages=cfg.max_pages,
    )

    commit_range = rnc.expand_commit_range(
        gateway=gateway,
        base=rnc.compare_base_ref(
            release=release,
            previous_release=previous_release,
        ),
        head=release.tag_name,
    )

    pulls = rnc.collect_pull_requests(
        gateway=gateway,
        commit_range=commit_range,
    )
    pulls = rnc.filter_pull_requests(
        pulls=pulls,
        label=cfg.label,
    )
    logger.info(f'{len(pulls)} pull requests will be listed in changelog ({cfg.label=})')

    changelog = rnrender.render_changelog(pulls)
    body, _ = rnrender.body_or_replacement(
        changelog,
        limit=rnrender.RELEASE_BODY_LIMIT,
    )

    release = upserter.update(
        release=release,
        body=body,
        name=cfg.effective_release_name,
    )

    return ReleaseNotesResult(
        release=release,
        created=created,
        previous_release=previous_release,
        commit_range=commit_range,
        pull_requests=tuple(pulls),
        changelog=changelog,
    )

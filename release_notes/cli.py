#!/usr/bin/env python

# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import collections.abc
import logging
import os
import sys

import release_notes.config as rncfg
import release_notes.errors as rne
import release_notes.gateway as rng
import release_notes.generate as rngen
import release_notes.log as rnlog
import release_notes.resolve as rnr

logger = logging.getLogger(__name__)


def parse_args(argv: collections.abc.Sequence[str] | None=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='create or update a GitHub-release, listing pull-requests merged since the '
        'previous release of the same release-line',
    )
    parser.add_argument(
        '--tag',
        required=True,
        help='the release\'s tag (`{prefix}/{version}` to denote a release-line)',
    )
    parser.add_argument(
        '--label-inclusive', '--label',
        dest='label',
        default=None,
        help='only list pull-requests w/ this label (all pull-requests are listed if empty)',
    )
    parser.add_argument(
        '--repo-url',
        required=False,
        default=None,
        help='github-repo-url ({host}/{org}/{repo}). derived from GitHubActions-Env-Vars by default',
    )
    parser.add_argument(
        '--github-auth-token',
        default=os.environ.get('GITHUB_TOKEN', None),
        help='the github-auth-token to use (defaults to GitHub-Action\'s default)',
    )
    parser.add_argument(
        '--config',
        default=None,
        help='optional path to a yaml-file w/ settings (passed arguments take precedence)',
    )
    parser.add_argument(
        '--release-name',
        default=None,
        help='the release\'s name (defaults to tag)',
    )
    parser.add_argument(
        '--page-size',
        type=int,
        default=None,
    )
    parser.add_argument(
        '--max-pages',
        type=int,
        default=None,
        help='max. amount of pages to read from release-list when searching previous release',
    )
    parser.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='timeout (in seconds) for each request against GitHub-API',
    )
    parser.add_argument(
        '--output',
        default=None,
        help='if set, rendered changelog is also written to this file (`-` for stdout)',
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        default=False,
    )

    return parser.parse_args(argv)


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


def config_from_args(
    parsed: argparse.Namespace,
    environ: collections.abc.Mapping[str, str]=os.environ,
) -> rncfg.ReleaseNotesConfig:
    if parsed.config:
        file_cfg = rncfg.read_file_config(parsed.config)
    else:
        file_cfg = rncfg.ReleaseNotesFileConfig()

    host, org, repo = rncfg.host_org_and_repo(
        repo_url=parsed.repo_url,
        environ=environ,
    )

    return rncfg.ReleaseNotesConfig(
        host=host,
        owner=org,
        repo=repo,
        tag=parsed.tag,
        label=_first_set(parsed.label, file_cfg.label),
        release_name=_first_set(parsed.release_name, file_cfg.release_name),
        page_size=_first_set(parsed.page_size, file_cfg.page_size, rnr.DEFAULT_PAGE_SIZE),
        max_pages=_first_set(parsed.max_pages, file_cfg.max_pages, rnr.DEFAULT_MAX_PAGES),
        timeout=_first_set(parsed.timeout, file_cfg.timeout, rncfg.DEFAULT_TIMEOUT_SECONDS),
        output=parsed.output,
    )


def write_changelog(
    changelog: str,
    output: str,
):
    if output == '-':
        sys.stdout.write(changelog)
        return

    with open(output, 'w') as f:
        f.write(changelog)


def main(argv: collections.abc.Sequence[str] | None=None) -> int:
    parsed = parse_args(argv)

    rnlog.configure_default_logging(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
    )

    try:
        cfg = config_from_args(parsed)
        gateway = rng.RepositoryGateway(
            owner=cfg.owner,
            name=cfg.repo,
            github_api=rncfg.github_api(
                host=cfg.host,
                token=parsed.github_auth_token,
                timeout=cfg.timeout,
            ),
        )
        result = rngen.publish_release_notes(
            gateway=gateway,
            cfg=cfg,
        )
    except rne.ReleaseNotesError as rnerr:
        logger.error(f'failed to publish release-notes: {rnerr}')
        return 1

    if cfg.output:
        try:
            write_changelog(
                changelog=result.changelog,
                output=cfg.output,
            )
        except OSError as oserr:
            # release was already updated at this point
            logger.error(f'published release-notes, but failed to write {cfg.output=}: {oserr}')
            return 1

    logger.info(f'published release-notes for {cfg.tag} ({result.release.html_url})')
    return 0


if __name__ == '__main__':
    sys.exit(main())

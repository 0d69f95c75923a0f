# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
model-classes for GitHub-API resources consumed and produced while creating release-notes.

Resources returned from GitHub ("read model") are parsed from their json-representation using
`dacite`; unknown attributes are ignored. Resources sent to GitHub ("write model") are kept
separate, so that an update can only be built from a release that was actually retrieved
(carrying its id and target-commitish).
'''

import dataclasses
import typing

import dacite

TAG_SEPARATOR = '/'

_dacite_cfg = dacite.Config(
    cast=[tuple],
)

T = typing.TypeVar('T')


def from_json(
    data_class: type[T],
    raw: dict,
) -> T:
    return dacite.from_dict(
        data_class=data_class,
        data=raw,
        config=_dacite_cfg,
    )


def tag_prefix(tag: str) -> str:
    '''
    returns the release-line prefix of the given tag, i.e. the part up to and including the first
    `/`. Tags w/o any `/` have an empty prefix.

    >>> tag_prefix('v1/2.0.0')
    'v1/'
    >>> tag_prefix('2.0.0')
    ''
    '''
    head, sep, _ = tag.partition(TAG_SEPARATOR)
    if not sep:
        return ''
    return f'{head}{sep}'


def in_release_line(
    tag: str,
    prefix: str,
) -> bool:
    '''
    returns whether `tag` belongs to the release-line identified by `prefix`.

    An empty prefix denotes the line of "bare" tags (tags w/o any `/`); it does not match
    prefixed tags.
    '''
    if not prefix:
        return TAG_SEPARATOR not in tag
    return tag.startswith(prefix)


@dataclasses.dataclass(frozen=True)
class Release:
    id: int
    tag_name: str
    target_commitish: str
    name: str | None = None
    body: str | None = None
    draft: bool = False
    prerelease: bool = False
    html_url: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class ReleaseRequest:
    tag_name: str
    name: str
    body: str | None = None
    target_commitish: str | None = None
    draft: bool = False
    prerelease: bool = False

    def as_payload(self) -> dict:
        return {
            k: v for k, v in dataclasses.asdict(self).items()
            if v is not None
        }


@dataclasses.dataclass(frozen=True, kw_only=True)
class ReleaseUpdate(ReleaseRequest):
    id: int

    @staticmethod
    def for_release(
        release: Release,
        name: str,
        body: str,
    ) -> 'ReleaseUpdate':
        '''
        creates an update for the given (existing) release. id and target-commitish are always
        taken from the passed release. draft- and prerelease-flags are always reset to `False`.
        '''
        return ReleaseUpdate(
            id=release.id,
            tag_name=release.tag_name,
            target_commitish=release.target_commitish,
            name=name,
            body=body,
            draft=False,
            prerelease=False,
        )

    def as_payload(self) -> dict:
        payload = super().as_payload()
        # id selects the release to edit, it is not an editable attribute
        del payload['id']
        return payload


@dataclasses.dataclass(frozen=True)
class Commit:
    sha: str


@dataclasses.dataclass(frozen=True)
class CommitRange:
    base: str
    head: str
    commits: tuple[Commit, ...] = ()
    total_commits: int | None = None

    @property
    def truncated(self) -> bool:
        if self.total_commits is None:
            return False
        return self.total_commits > len(self.commits)


@dataclasses.dataclass(frozen=True)
class Label:
    name: str


@dataclasses.dataclass(frozen=True)
class User:
    login: str


@dataclasses.dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    html_url: str
    labels: tuple[Label, ...] = ()
    user: User | None = None

    @property
    def label_names(self) -> frozenset[str]:
        return frozenset(label.name for label in self.labels)

    def has_label(self, name: str) -> bool:
        return name in self.label_names

'''
Release Notes Publisher

Creates or updates the GitHub-release for a given tag, setting its body to a changelog of all
pull-requests merged since the previous release.

Tags may denote a release-line using a prefix, separated by `/` (e.g. `v1/2.1.0`). The previous
release is the most recent release whose tag shares the same prefix; for tags w/o prefix, only
other tags w/o prefix are considered. If there is no previous release, all commits reachable from
the release's target-commitish are considered.

Optionally, only pull-requests carrying a given label are listed.
'''

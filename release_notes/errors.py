# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


class ReleaseNotesError(RuntimeError):
    '''
    base class for all errors raised while generating and publishing release-notes.
    '''
    pass


class ConfigError(ReleaseNotesError, ValueError):
    pass


class GatewayError(ReleaseNotesError):
    '''
    raised for any failed interaction with the GitHub-API (transport, authentication, unexpected
    status code, undecodable payload) that is not covered by `NotFound`.
    '''
    def __init__(
        self,
        message: str,
        status_code: int | None=None,
    ):
        super().__init__(message)
        self.status_code = status_code


class NotFound(GatewayError):
    '''
    raised if GitHub-API signalled the requested resource does not exist (http-404).
    '''
    def __init__(
        self,
        message: str,
    ):
        super().__init__(message, status_code=404)


class PaginationLimitExceeded(ReleaseNotesError):
    pass

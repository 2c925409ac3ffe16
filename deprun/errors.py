"""Error types raised by DepRun."""


class UpdaterError(Exception):
    """Base class for errors that abort a whole update run."""


class JobParseError(UpdaterError):
    """The job file could not be read or did not match the job schema."""


class PackageManagerMismatchError(UpdaterError):
    """The job targets a different package manager than this updater."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Package manager must be '{expected}', got '{actual}'")


class MissingReportedDependencyError(UpdaterError):
    """An updatable dependency has no single counterpart in the reported list."""

    def __init__(self, name: str, file: str, matches: int):
        self.name = name
        self.file = file
        self.matches = matches
        super().__init__(
            f"Expected exactly one reported dependency {name} in {file}, found {matches}"
        )


class ApiError(UpdaterError):
    """The reporting API rejected a request or could not be reached."""


class ConfigurationError(UpdaterError):
    """A runtime setting has a value the updater cannot use."""

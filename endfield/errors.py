class EndfieldError(Exception):
    pass


class PersistenceError(EndfieldError):
    """A single file in a batch could not be written. Files saved before it remain valid."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save {path}: {reason}")


class ApplyError(EndfieldError):
    """A kubectl/helm invocation failed. The first stderr line is surfaced, the call is never retried."""

    def __init__(self, command: str, stderr: str):
        self.command = command
        self.stderr = stderr
        lines = [l for l in stderr.strip().splitlines() if l.strip()]
        self.first_line = lines[0].strip() if lines else 'unknown error'
        super().__init__(f"{command}: {self.first_line}")


class PartialDeleteError(EndfieldError):
    def __init__(self, deleted_files: list[str], cluster_error: str):
        self.deleted_files = deleted_files
        self.cluster_error = cluster_error
        super().__init__(
            f"Removed {len(deleted_files)} file(s) from disk but cluster removal failed: {cluster_error}")


class CommandError(EndfieldError):
    def __init__(self, command: str, message: str):
        self.command = command
        self.message = message
        super().__init__(f"{command} failed: {message}")

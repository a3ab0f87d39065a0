class FutureError(Exception):
    """Base class for every error raised by fp_future."""


class AlreadySettledError(FutureError, RuntimeError):
    """A producer settled a memoised Future more than once."""

    def __init__(self, memo, channel: str):
        self.memo = memo
        self.channel = channel
        super().__init__(
            f"{memo!r} is already {memo.state.value}, "
            f"refusing a second settlement on the {channel} channel"
        )

"""Chat commands."""

from chatline.application.commands.chat.submit_message import (
    SubmitMessageCommand,
    SubmitMessageHandler,
    RetryPolicy,
)

__all__ = [
    "SubmitMessageCommand",
    "SubmitMessageHandler",
    "RetryPolicy",
]

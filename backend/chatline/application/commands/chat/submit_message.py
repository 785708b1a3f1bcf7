"""
SubmitMessage Command - persist a message, deliver it live, acknowledge the sender.

This handler is the message router. It holds no state of its own; it
orchestrates the identity directory, the conversation store and the
connection registry.

Flow:
  1. Validate: no self-send, content or media present      → DomainValidationError
  2. Receiver must exist in the identity directory          → EntityNotFoundError
  3. Append to the conversation store, retrying transient
     StoreUnavailableError with bounded exponential backoff → StoreUnavailableError
  4. Recipient online?  offer Deliver to its live connection (best effort)
  5. Origin connection? offer Ack with the persisted message

No rejection path persists anything, and nothing is delivered unless the
append succeeded. Delivery failures never reach the sender: the message is
already durable and shows up on the recipient's next history fetch.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from chatline.application.common.interfaces import Command, CommandHandler
from chatline.application.dto.chat import MessageDTO
from chatline.application.dto.events import AckEvent, DeliverEvent
from chatline.config.settings import Config
from chatline.domain.entities.message import Message
from chatline.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    StoreUnavailableError,
)
from chatline.domain.ports.connection_handle import ConnectionHandle
from chatline.domain.ports.repositories import ConversationStore, UserRepository
from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId
from chatline.infrastructure.realtime.connection_registry import ConnectionRegistry
from chatline.observability.metrics import (
    DeliveryOutcome,
    increment_delivery,
    increment_messages_persisted,
    increment_store_retry,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = Config.STORE_RETRY_ATTEMPTS
    base_delay: float = Config.STORE_RETRY_BASE_DELAY
    max_delay: float = Config.STORE_RETRY_MAX_DELAY

    def retrying(self) -> AsyncRetrying:
        """
        Retry StoreUnavailableError only, exponential backoff with jitter
        (base_delay, 2 * base_delay, ... capped at max_delay).
        """
        return AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential_jitter(
                initial=self.base_delay, max=self.max_delay, jitter=self.base_delay / 2
            ),
            retry=retry_if_exception_type(StoreUnavailableError),
            before_sleep=_before_retry,
            reraise=True,
        )


_log_retry = before_sleep_log(logger, logging.WARNING)


def _before_retry(retry_state: RetryCallState) -> None:
    increment_store_retry()
    _log_retry(retry_state)


@dataclass(frozen=True)
class SubmitMessageCommand(Command[Message]):
    sender_id: UserId
    receiver_id: UserId
    content: Optional[str] = None
    media_ref: Optional[MediaRef] = None
    # Connection the submission arrived on; None for REST submissions.
    origin: Optional[ConnectionHandle] = None
    # Client-side id of the optimistic copy, echoed back in the ack.
    client_id: Optional[str] = None


class SubmitMessageHandler(CommandHandler[Message]):
    def __init__(
        self,
        conversation_store: ConversationStore,
        user_repository: UserRepository,
        registry: ConnectionRegistry,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self._store = conversation_store
        self._users = user_repository
        self._registry = registry
        self._retry = retry_policy or RetryPolicy()

    async def execute(self, command: SubmitMessageCommand) -> Message:
        if command.sender_id == command.receiver_id:
            raise DomainValidationError("You cannot message yourself")

        content = command.content if command.content and command.content.strip() else None
        if content is None and command.media_ref is None:
            raise DomainValidationError("Message content or media is required")

        receiver = await self._users.get_by_id(command.receiver_id)
        if receiver is None:
            raise EntityNotFoundError("Receiver not found")

        conversation_key = ConversationKey.of(command.sender_id, command.receiver_id)
        message = await self._append_with_retry(
            conversation_key, command.sender_id, command.receiver_id, content, command.media_ref
        )
        increment_messages_persisted(has_media=message.media_ref is not None)

        payload = MessageDTO.from_entity(message)
        self._deliver(message, payload)
        if command.origin is not None:
            ack = AckEvent(client_id=command.client_id, message=payload)
            if not command.origin.offer(ack.model_dump(mode="json")):
                logger.info(
                    f"Ack for message {message.id} not queued: "
                    f"sender {command.sender_id} connection is closed"
                )
        return message

    async def _append_with_retry(
        self,
        conversation_key: ConversationKey,
        sender_id: UserId,
        receiver_id: UserId,
        content: Optional[str],
        media_ref: Optional[MediaRef],
    ) -> Message:
        try:
            return await self._retry.retrying()(
                self._store.append,
                conversation_key,
                sender_id,
                receiver_id,
                content,
                media_ref,
            )
        except StoreUnavailableError as e:
            logger.error(
                f"Append to {conversation_key} failed after {self._retry.attempts} attempts: {e}"
            )
            raise

    def _deliver(self, message: Message, payload: MessageDTO) -> None:
        # Looked up at delivery time, after persistence.
        recipient = self._registry.lookup(message.receiver_id)
        if recipient is None:
            increment_delivery(DeliveryOutcome.OFFLINE)
            return

        delivered = recipient.offer(DeliverEvent(message=payload).model_dump(mode="json"))
        if delivered:
            increment_delivery(DeliveryOutcome.DELIVERED)
        else:
            increment_delivery(DeliveryOutcome.DROPPED)
            logger.info(
                f"Delivery of message {message.id} to user {message.receiver_id} dropped; "
                "available on next history fetch"
            )

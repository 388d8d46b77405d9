"""Pub/sub publishers for run-state and history notifications."""

import logging
from pubsub import pub

from .models.run_state import RunState

logger = logging.getLogger(__name__)

RUN_STATE_TOPIC = "pipeline.state"
HISTORY_TOPIC = "history.changed"


def _send(topic: str, **message) -> bool:
    """Deliver a message, keeping listener failures away from the sender.

    Returns:
        True if every listener handled the message
    """
    try:
        pub.sendMessage(topic, **message)
    except Exception as e:
        logger.error(f"Listener on topic '{topic}' failed: {e}", exc_info=True)
        return False
    return True


class RunStatePublisher:
    """Publishes recognition run-state transitions using pubsub.pub."""

    def __init__(self, topic: str = RUN_STATE_TOPIC):
        """Initialize run-state publisher.

        Args:
            topic: Pub/sub topic name for run-state transitions
        """
        self.topic = topic
        logger.info(f"RunStatePublisher initialized with topic: {topic}")

    def publish_state(self, state: RunState) -> bool:
        """Publish a run state to the pub/sub topic."""
        delivered = _send(self.topic, state=state)
        logger.debug(f"Published run state: {state.status.value}")
        return delivered


class HistoryPublisher:
    """Publishes history mutations using pubsub.pub."""

    def __init__(self, topic: str = HISTORY_TOPIC):
        self.topic = topic
        logger.info(f"HistoryPublisher initialized with topic: {topic}")

    def publish_change(self, action: str, size: int) -> bool:
        """Publish a history mutation.

        A failing listener is logged; the mutation it reports is already
        committed and stays so.

        Args:
            action: "insert" or "clear"
            size: Number of records after the mutation

        Returns:
            True if every listener handled the message
        """
        delivered = _send(self.topic, action=action, size=size)
        logger.debug(f"Published history change: {action} (size={size})")
        return delivered

# -*- coding: utf-8 -*-
"""
Unit тесты для сводки переписок
"""

from datetime import datetime, timedelta
from types import SimpleNamespace

from hypothesis import given
from hypothesis import strategies as st

from src.service.conversations import aggregate_conversations

ME = 1
BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def _user(user_id, first="User", last=None):
    return SimpleNamespace(id=user_id, first_name=first, last_name=last or str(user_id))


def _message(sender_id, recipient_id, minutes, content="", is_read=False, users=None):
    users = users or {}
    return SimpleNamespace(
        sender_id=sender_id,
        recipient_id=recipient_id,
        sender=users.get(sender_id, _user(sender_id)),
        recipient=users.get(recipient_id, _user(recipient_id)),
        content=content,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        is_read=is_read,
    )


class TestAggregateConversations:
    """Unit тесты aggregate_conversations"""

    def test_empty(self):
        """Нет сообщений: нет переписок"""
        assert aggregate_conversations([], [], ME) == []

    def test_latest_message_per_peer(self):
        """Сводка берет последнее сообщение из обоих направлений"""
        users = {2: _user(2, "Анна", "Иванова")}
        received = [_message(2, ME, 1, "первое", users=users)]
        sent = [_message(ME, 2, 5, "ответ", users=users)]

        result = aggregate_conversations(received, sent, ME)

        assert len(result) == 1
        summary = result[0]
        assert summary.peer_id == 2
        assert summary.name == "Анна Иванова"
        assert summary.last_message == "ответ"
        assert summary.timestamp == BASE_TIME + timedelta(minutes=5)
        assert summary.unread_count == 1

    def test_sorted_by_timestamp_desc(self):
        """Самые свежие переписки первыми"""
        received = [_message(2, ME, 1), _message(3, ME, 10), _message(4, ME, 5)]

        result = aggregate_conversations(received, [], ME)

        assert [item.peer_id for item in result] == [3, 4, 2]

    def test_unread_counts_only_unread_received(self):
        """Непрочитанные считаются только по входящим"""
        received = [
            _message(2, ME, 1, is_read=False),
            _message(2, ME, 2, is_read=True),
            _message(2, ME, 3, is_read=False),
        ]
        sent = [_message(ME, 2, 4, is_read=False)]

        result = aggregate_conversations(received, sent, ME)

        assert result[0].unread_count == 2

    def test_missing_peer_is_skipped(self):
        """Сообщение без загруженного собеседника пропускается"""
        orphan = _message(2, ME, 10, "потерянное")
        orphan.sender = None
        received = [orphan, _message(2, ME, 1, "старое")]

        result = aggregate_conversations(received, [], ME)

        assert len(result) == 1
        assert result[0].last_message == "старое"
        assert result[0].unread_count == 2

    def test_unread_from_unresolved_peer_ignored(self):
        """Непрочитанные от собеседника без сводки не попадают в результат"""
        orphan = _message(5, ME, 1)
        orphan.sender = None

        assert aggregate_conversations([orphan], [], ME) == []

    def test_tie_keeps_first_seen(self):
        """При равном времени остается первое встреченное сообщение"""
        received = [_message(2, ME, 3, "входящее")]
        sent = [_message(ME, 2, 3, "исходящее")]

        result = aggregate_conversations(received, sent, ME)

        assert result[0].last_message == "входящее"


_messages = st.lists(
    st.tuples(
        st.integers(min_value=2, max_value=6),
        st.booleans(),
        st.integers(min_value=0, max_value=50),
        st.booleans(),
    ),
    max_size=30,
)


def _build(rows):
    received, sent = [], []
    for peer_id, incoming, minutes, is_read in rows:
        if incoming:
            received.append(_message(peer_id, ME, minutes, is_read=is_read))
        else:
            sent.append(_message(ME, peer_id, minutes, is_read=is_read))
    return received, sent


class TestAggregateConversationsProperties:
    """Свойства aggregate_conversations на случайных данных"""

    @given(_messages)
    def test_one_summary_per_peer(self, rows):
        received, sent = _build(rows)

        result = aggregate_conversations(received, sent, ME)

        peers = {peer_id for peer_id, *_ in rows}
        assert sorted(item.peer_id for item in result) == sorted(peers)

    @given(_messages)
    def test_timestamp_is_latest(self, rows):
        received, sent = _build(rows)

        result = aggregate_conversations(received, sent, ME)

        for item in result:
            times = [
                m.created_at
                for m in [*received, *sent]
                if item.peer_id in (m.sender_id, m.recipient_id)
            ]
            assert item.timestamp == max(times)

    @given(_messages)
    def test_unread_bounded_by_received(self, rows):
        received, sent = _build(rows)

        result = aggregate_conversations(received, sent, ME)

        for item in result:
            incoming = [m for m in received if m.sender_id == item.peer_id]
            assert 0 <= item.unread_count <= len(incoming)
            assert item.unread_count == sum(not m.is_read for m in incoming)

    @given(_messages)
    def test_result_is_sorted(self, rows):
        received, sent = _build(rows)

        result = aggregate_conversations(received, sent, ME)

        timestamps = [item.timestamp for item in result]
        assert timestamps == sorted(timestamps, reverse=True)

"""Direct messages between users."""
from __future__ import annotations

from django.db.models import Count, DateTimeField, OuterRef, Q, Subquery
from rest_framework.exceptions import NotFound

from clinic.models import Message, Role, User
from clinic.services import realtime
from clinic.services.users import format_user_ref


def format_message(m: Message) -> dict:
    return {
        'id': m.id,
        'sender': m.sender_id,
        'receiver': m.receiver_id,
        'message': m.message,
        'read': m.read,
        'createdAt': m.created_at.isoformat() if m.created_at else None,
    }


def send(sender: User, *, receiver_id: int, text: str) -> Message:
    if not User.objects.filter(pk=receiver_id).exists():
        raise NotFound('Receiver not found')
    msg = Message.objects.create(sender=sender, receiver_id=receiver_id, message=text)
    realtime.emit_to_user(receiver_id, 'receive_message', format_message(msg))
    return msg


def conversation(user: User, other_id: int):
    pair = Q(sender=user, receiver_id=other_id) | Q(sender_id=other_id, receiver=user)
    return Message.objects.filter(pair).order_by('created_at', 'id')


def contacts(user: User) -> list[dict]:
    """Users ``user`` may chat with, most recent conversation first.

    Patients only see doctors.
    """
    qs = User.objects.exclude(pk=user.pk).filter(is_active=True)
    if user.role == Role.PATIENT:
        qs = qs.filter(role=Role.DOCTOR)
    last = (Message.objects
            .filter(Q(sender=user, receiver=OuterRef('pk')) | Q(sender=OuterRef('pk'), receiver=user))
            .order_by('-created_at').values('created_at')[:1])
    qs = qs.annotate(
        last_message_at=Subquery(last, output_field=DateTimeField()),
        unread_count=Count('sent_messages', filter=Q(sent_messages__receiver=user, sent_messages__read=False)),
    )
    rows = []
    for u in qs:
        last_at = u.last_message_at
        rows.append({
            **format_user_ref(u),
            'lastMessageTime': int(last_at.timestamp() * 1000) if last_at else 0,
            'unreadCount': u.unread_count,
        })
    rows.sort(key=lambda r: (-r['lastMessageTime'], r['firstName'].lower()))
    return rows


def mark_read(user: User, sender_id: int) -> int:
    return Message.objects.filter(sender_id=sender_id, receiver=user, read=False).update(read=True)

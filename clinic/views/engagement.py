"""Reviews, chat and global search."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import capability
from clinic.serializers.feedback import MessageSendSerializer, ReviewCreateSerializer
from clinic.services import chat, reviews
from clinic.services.audit import log_activity
from clinic.services.search import search as run_search


@api_view(['POST'])
@permission_classes([IsAuthenticated, capability('reviews')])
def create_review(request):
    s = ReviewCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    review = reviews.create_review(request.user, appointment_id=v['appointmentId'], rating=v['rating'],
                                   comment=v['comment'])
    log_activity(user=request.user, action='CREATE', entity='Review', entity_id=review.id,
                 details=f'Rated Dr. {review.doctor.last_name} with {review.rating} stars', request=request)
    return Response(reviews.format_review(review), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('reviews.read')])
def doctor_reviews(request, doctor_id: int):
    return Response(reviews.doctor_reviews(doctor_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('reviews.read')])
def doctor_ratings(request):
    return Response(reviews.ratings_map())


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('reviews.read')])
def review_check(request, appointment_id: int):
    return Response(reviews.check(appointment_id))


@api_view(['POST'])
@permission_classes([IsAuthenticated, capability('chat')])
def chat_send(request):
    s = MessageSendSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    msg = chat.send(request.user, receiver_id=s.validated_data['receiverId'], text=s.validated_data['message'])
    return Response(chat.format_message(msg), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('chat')])
def chat_users(request):
    return Response(chat.contacts(request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('chat')])
def chat_conversation(request, user_id: int):
    return Response([chat.format_message(m) for m in chat.conversation(request.user, user_id)])


@api_view(['PUT'])
@permission_classes([IsAuthenticated, capability('chat')])
def chat_mark_read(request, sender_id: int):
    chat.mark_read(request.user, sender_id)
    return Response({'message': 'Messages marked as read'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('search')])
def search(request):
    return Response(run_search(request.user, request.query_params.get('q')))

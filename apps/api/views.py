from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.activities.models import Activity
from apps.contacts.models import Contact
from apps.deals.models import Deal
from apps.invoices.models import Invoice
from apps.reminders.models import Reminder
from apps.tickets.models import Ticket
from .serializers import (
    ActivitySerializer,
    ContactSerializer,
    DealSerializer,
    InvoiceSerializer,
    ReminderSerializer,
    TicketMessageSerializer,
    TicketSerializer,
)


class OwnedModelViewSet(viewsets.ModelViewSet):
    """
    CRUD over the requesting user's rows only

    Rows of other users are outside the queryset, so they answer 404.
    """

    model = None

    def get_queryset(self):
        return self.model.objects.filter(owner=self.request.user)

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)


class ContactViewSet(OwnedModelViewSet):
    model = Contact
    serializer_class = ContactSerializer

    def get_queryset(self):
        queryset = super().get_queryset().prefetch_related('tags').order_by('-created_at')
        query = self.request.query_params.get('q')
        if query:
            queryset = queryset.filter(name__icontains=query)
        return queryset


class DealViewSet(OwnedModelViewSet):
    model = Deal
    serializer_class = DealSerializer

    def get_queryset(self):
        queryset = super().get_queryset().select_related('contact').order_by('-created_at')
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    def perform_update(self, serializer):
        # Status moves go through the model so they reach the timeline
        old_status = serializer.instance.status
        new_status = serializer.validated_data.get('status', old_status)
        deal = serializer.save(status=old_status)
        deal.change_status(new_status, user=self.request.user)


class InvoiceViewSet(OwnedModelViewSet):
    model = Invoice
    serializer_class = InvoiceSerializer

    def get_queryset(self):
        queryset = super().get_queryset().select_related('contact', 'deal').order_by('-created_at')
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset


class ReminderViewSet(OwnedModelViewSet):
    model = Reminder
    serializer_class = ReminderSerializer

    def get_queryset(self):
        return super().get_queryset().for_filter(self.request.query_params.get('filter', 'all')).order_by('due_date')

    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        reminder = self.get_object()
        reminder.toggle_complete()
        return Response(self.get_serializer(reminder).data)


class TicketViewSet(OwnedModelViewSet):
    model = Ticket
    serializer_class = TicketSerializer

    def get_queryset(self):
        queryset = super().get_queryset().select_related('contact').order_by('-created_at')
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    @action(detail=True, methods=['get', 'post'])
    def messages(self, request, pk=None):
        ticket = self.get_object()

        if request.method == 'POST':
            serializer = TicketMessageSerializer(data=request.data, context=self.get_serializer_context())
            serializer.is_valid(raise_exception=True)
            serializer.save(ticket=ticket, author=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)

        thread = ticket.messages.select_related('author').order_by('created_at')
        return Response(TicketMessageSerializer(thread, many=True, context=self.get_serializer_context()).data)


class ActivityViewSet(OwnedModelViewSet):
    model = Activity
    serializer_class = ActivitySerializer
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        return super().get_queryset().select_related('contact', 'deal').order_by('-created_at')

    def perform_create(self, serializer):
        deal = serializer.validated_data.get('deal')
        contact = serializer.validated_data.get('contact') or (deal.contact if deal else None)
        serializer.save(owner=self.request.user, contact=contact)

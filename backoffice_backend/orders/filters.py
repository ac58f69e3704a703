# orders/filters.py

import django_filters

from orders.models import Order, OrderStatus, PaymentType


class OrderFilter(django_filters.FilterSet):
    """
    GET /api/orders?status=Pending&paymentType=Cash&clientId=<uuid>
                    &deliveryFrom=YYYY-MM-DD&deliveryTo=YYYY-MM-DD
    """

    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    paymentType = django_filters.ChoiceFilter(field_name="payment_type", choices=PaymentType.choices)
    clientId = django_filters.UUIDFilter(field_name="client_id")
    deliveryFrom = django_filters.DateFilter(field_name="delivery_date", lookup_expr="gte")
    deliveryTo = django_filters.DateFilter(field_name="delivery_date", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "paymentType", "clientId", "deliveryFrom", "deliveryTo"]

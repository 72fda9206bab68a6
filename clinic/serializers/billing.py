from rest_framework import serializers

from clinic.models import Invoice


class LineItemSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class MedicineLineSerializer(serializers.Serializer):
    medicineId = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    name = serializers.CharField(required=False, allow_blank=True)


class InvoiceCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField()
    doctorId = serializers.IntegerField(required=False, allow_null=True)
    appointmentId = serializers.IntegerField(required=False, allow_null=True)
    invoiceType = serializers.ChoiceField(choices=[c[0] for c in Invoice.TYPE_CHOICES], required=False,
                                          default=Invoice.TYPE_CONSULTATION)
    items = LineItemSerializer(many=True, required=False, default=list)
    medicineItems = MedicineLineSerializer(many=True, required=False, default=list)

    def validate(self, attrs):
        is_sale = attrs['invoiceType'] == Invoice.TYPE_PHARMACY and attrs['medicineItems']
        if not is_sale and not attrs['items']:
            raise serializers.ValidationError({'items': 'At least one line item is required'})
        return attrs


class MedicineSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    category = serializers.CharField(max_length=128)
    stock = serializers.IntegerField(min_value=0)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    expiryDate = serializers.DateField()
    supplier = serializers.CharField(required=False, allow_blank=True, max_length=255)


class AlertQuerySerializer(serializers.Serializer):
    lowStock = serializers.IntegerField(required=False, min_value=0, default=10)
    expiryDays = serializers.IntegerField(required=False, min_value=0, default=30)

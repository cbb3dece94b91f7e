from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from medical.models import InventoryItem
from medical.permissions import IsMedicalStaff


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def list_inventory(request):
    """Medicine names and current stock, alphabetical."""
    medicines = list(InventoryItem.objects.order_by('medicine').values('medicine', 'stock'))
    return Response({'success': True, 'data': medicines})

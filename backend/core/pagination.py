from django.core.paginator import Paginator
from rest_framework.response import Response


def paginated_response(request, queryset, serializer_class, default_limit=10, context=None):
    """Page a queryset with ?page=&limit= and wrap it in the standard envelope"""
    try:
        page = max(int(request.query_params.get('page', 1)), 1)
        limit = max(min(int(request.query_params.get('limit', default_limit)), 100), 1)
    except (TypeError, ValueError):
        page, limit = 1, default_limit

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)

    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})
    return Response({
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    })

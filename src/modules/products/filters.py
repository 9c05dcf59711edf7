import django_filters
from django.db.models import Q

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    code = django_filters.CharFilter(field_name="code", lookup_expr="iexact")
    color = django_filters.CharFilter(field_name="color", lookup_expr="icontains")

    class Meta:
        model = Product
        fields = ["search", "code", "color"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(code__icontains=value) | Q(name__icontains=value) | Q(color__icontains=value)
        )

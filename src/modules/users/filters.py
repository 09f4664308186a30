import django_filters

from modules.users.models import User


class UserFilter(django_filters.FilterSet):
    username = django_filters.CharFilter(field_name="username", lookup_expr="icontains")
    email = django_filters.CharFilter(field_name="email", lookup_expr="iexact")

    class Meta:
        model = User
        fields = ["username", "email"]

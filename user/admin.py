from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from .models import User

@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('id', 'username', 'email', 'name', 'is_private', 'is_deleted', 'created_at')

    # Low-cardinality flags make cheap sidebar filters
    list_filter = ('is_private', 'is_deleted', 'is_staff')

    search_fields = ('username', 'email', 'name')
    ordering = ('-created_at',)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Profile', {'fields': ('name', 'bio', 'profile_pic', 'is_private', 'is_deleted')}),
    )

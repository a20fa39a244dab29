from django.contrib import admin
from .models import Follow

@admin.register(Follow)
class FollowAdmin(admin.ModelAdmin):
    list_display = ('followed_by', 'following', 'status', 'updated_at')
    # Pull both users in one query for each row
    list_select_related = ('followed_by', 'following')

    search_fields = ('followed_by__username', 'following__username')
    list_filter = ('status',)
    ordering = ('-updated_at',)

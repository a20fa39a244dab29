from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.db import models
from django.db.models.functions import Lower


class UserManager(DjangoUserManager):
    def get_by_natural_key(self, username):
        # usernames are unique regardless of case
        return self.get(username__iexact=username)

    def live(self):
        return self.get_queryset().filter(is_deleted=False)


class User(AbstractUser):
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255, blank=True, null=True)
    bio = models.CharField(max_length=255, blank=True, null=True)
    profile_pic = models.URLField(max_length=255, blank=True, null=True)
    is_private = models.BooleanField(default=False, db_index=True)
    # soft delete flag; rows are never removed so follow history stays intact
    is_deleted = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    REQUIRED_FIELDS = ['email']

    def save(self, *args, **kwargs):
        if self.username:
            self.username = self.username.lower()
        if self.email:
            self.email = self.email.lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.username

    class Meta:
        constraints = [
            models.UniqueConstraint(Lower('username'), name='unique_lower_username'),
        ]

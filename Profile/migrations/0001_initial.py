import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Follow',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('notFollowing', 'Not following')], default='pending', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('followed_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='following_edges', to=settings.AUTH_USER_MODEL)),
                ('following', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='followed_by_edges', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['following', 'status', '-updated_at'], name='follow_following_status_idx'),
                    models.Index(fields=['followed_by', 'status', '-updated_at'], name='follow_followedby_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('followed_by', 'following'), name='unique_follow_pair'),
                    models.CheckConstraint(condition=models.Q(('followed_by', models.F('following')), _negated=True), name='no_self_follow'),
                ],
            },
        ),
    ]

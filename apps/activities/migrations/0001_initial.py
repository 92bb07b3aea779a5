import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contacts', '0001_initial'),
        ('deals', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('note', 'Note'), ('call', 'Call'), ('email', 'Email'), ('meeting', 'Meeting'), ('whatsapp', 'WhatsApp'), ('other', 'Other')], default='note', help_text='Type of activity', max_length=20)),
                ('title', models.CharField(help_text='Short summary of what happened', max_length=200)),
                ('description', models.TextField(blank=True, help_text='Details')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='When did this activity occur')),
                ('contact', models.ForeignKey(blank=True, help_text='Contact this activity is about', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='contacts.contact')),
                ('deal', models.ForeignKey(blank=True, help_text='Deal this activity is about', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='deals.deal')),
                ('owner', models.ForeignKey(help_text='User who owns this activity', on_delete=django.db.models.deletion.CASCADE, related_name='activities', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Activity',
                'verbose_name_plural': 'Activities',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['owner', '-created_at'], name='activity_owner_created_idx')],
            },
        ),
    ]

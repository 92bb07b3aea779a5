import apps.accounts.models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('email', models.EmailField(db_index=True, help_text='Required. Used for login.', max_length=255, unique=True, verbose_name='email address')),
                ('first_name', models.CharField(blank=True, help_text="User's first name (e.g., Jane)", max_length=50, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, help_text="User's last name (e.g., Doe)", max_length=50, verbose_name='last name')),
                ('phone', models.CharField(blank=True, help_text='Contact phone number (e.g., +14155550100)', max_length=17, validators=[django.core.validators.RegexValidator(message='Phone number must be entered in the format: +999999999. Up to 15 digits allowed.', regex='^\\+?1?\\d{9,15}$')], verbose_name='phone number')),
                ('company_name', models.CharField(blank=True, help_text='Business name shown on invoices', max_length=150, verbose_name='company name')),
                ('job_title', models.CharField(blank=True, help_text='e.g., Sales Manager, Founder', max_length=100, verbose_name='job title')),
                ('avatar', models.ImageField(blank=True, help_text='Profile picture (recommended: 300x300px, max 2MB)', null=True, upload_to='avatars/%Y/%m/', verbose_name='profile picture')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into admin site.', verbose_name='staff status')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'ordering': ['-date_joined'],
                'indexes': [models.Index(fields=['is_active'], name='user_is_active_idx')],
            },
            managers=[
                ('objects', apps.accounts.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='UserProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email_notifications', models.BooleanField(default=True, help_text='Receive email updates about your account', verbose_name='email notifications')),
                ('deal_updates', models.BooleanField(default=True, help_text='Get notified when deals change status', verbose_name='deal updates')),
                ('reminder_alerts', models.BooleanField(default=True, help_text='Receive a daily digest of due and overdue reminders', verbose_name='reminder alerts')),
                ('invoice_notifications', models.BooleanField(default=True, help_text='Get notified when invoices are paid or overdue', verbose_name='invoice notifications')),
                ('currency', models.CharField(choices=[('USD', 'US Dollar'), ('EUR', 'Euro'), ('GBP', 'British Pound'), ('EGP', 'Egyptian Pound'), ('AED', 'UAE Dirham'), ('SAR', 'Saudi Riyal')], default='USD', help_text='Currency used to display amounts', max_length=3, verbose_name='currency')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='profile', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'user profile',
                'verbose_name_plural': 'user profiles',
            },
        ),
    ]

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _
from django.utils.html import format_html
from .models import User, UserProfile


# USER PROFILE INLINE (Edit preferences inside user form)
class UserProfileInline(admin.StackedInline):

    model = UserProfile

    # OneToOne relationship: exactly one profile
    can_delete = False
    verbose_name = _('Preferences')
    verbose_name_plural = _('Preferences')

    fk_name = "user"
    extra = 0
    max_num = 1

    fieldsets = (
        (_('Notification Settings'), {
            'fields': ('email_notifications', 'deal_updates', 'reminder_alerts', 'invoice_notifications'),
            'classes': ('collapse',),
        }),
        (_('Preferences'), {
            'fields': ('currency',),
            'classes': ('collapse',),
        }),
    )



# CUSTOM USER ADMIN
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = (
        'email',
        'get_full_name_display',
        'company_name',
        'is_active_badge',
        'date_joined',
    )

    list_display_links = ('email', 'get_full_name_display')

    list_filter = (
        'is_active',
        'is_staff',
        'is_superuser',
        'date_joined',
    )
    search_fields = (
        'email',
        'first_name',
        'last_name',
        'phone',
        'company_name',
    )

    ordering = ('-date_joined',)
    list_per_page = 25
    list_select_related = ('profile',)

    fieldsets = (
        (_('Login Credentials'), {
            'fields': ('email', 'password'),
            'classes': ('wide',),
            'description': _('Email is used for login. Password is stored encrypted.')
        }),
        (_('Personal Information'), {
            'fields': ('first_name', 'last_name', 'phone', 'company_name', 'job_title', 'avatar'),
            'classes': ('wide',),
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        (_('Activity Tracking'), {
            'fields': ('date_joined', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    # Fields shown when creating NEW user
    add_fieldsets = (
        (_('Login Credentials'), {
            'fields': ('email', 'password1', 'password2'),
            'classes': ('wide',),
        }),
        (_('Personal Information'), {
            'fields': ('first_name', 'last_name', 'company_name'),
            'classes': ('wide',),
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff'),
        }),
    )

    readonly_fields = ('date_joined', 'last_login')

    inlines = [UserProfileInline]

    def get_full_name_display(self, obj):
        return obj.get_full_name()

    get_full_name_display.short_description = _('Full Name')
    get_full_name_display.admin_order_field = 'first_name'

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html(
                '<span style="background: #28a745; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-size: 11px;">{}</span>', _('Active')
            )
        return format_html(
            '<span style="background: #dc3545; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-size: 11px;">{}</span>', _('Inactive')
        )

    is_active_badge.short_description = _('Status')
    is_active_badge.admin_order_field = 'is_active'

    actions = ['activate_users', 'deactivate_users']

    def activate_users(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(
            request,
            _('%(count)d user(s) were successfully activated.') % {'count': updated},
            level='success'
        )

    activate_users.short_description = _('Activate selected users')

    def deactivate_users(self, request, queryset):
        """
        Bulk action: Deactivate selected users (superusers are skipped)
        """
        updated = queryset.filter(is_superuser=False).update(is_active=False)
        self.message_user(
            request,
            _('%(count)d user(s) were successfully deactivated.') % {'count': updated},
            level='success'
        )

    deactivate_users.short_description = _('Deactivate selected users')

    def has_delete_permission(self, request, obj=None):
        if obj and obj == request.user:
            return False  # Cannot delete yourself

        return super().has_delete_permission(request, obj)


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = (
        'user',
        'email_notifications',
        'deal_updates',
        'reminder_alerts',
        'invoice_notifications',
        'currency',
    )

    list_filter = (
        'email_notifications',
        'reminder_alerts',
        'currency',
    )

    search_fields = (
        'user__email',
        'user__first_name',
        'user__last_name',
    )

    readonly_fields = ('created_at', 'updated_at')


# ADMIN SITE CUSTOMIZATION
admin.site.site_header = _('CRM Administration')
admin.site.site_title = _('CRM')
admin.site.index_title = _('Welcome to the CRM Admin Panel')

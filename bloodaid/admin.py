from django.contrib import admin

from .models import Account, DonationRequest, FundRecord


class AccountAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'role', 'status', 'blood_group', 'district', 'last_login')
    list_filter = ('role', 'status', 'blood_group')
    search_fields = ('email', 'name', 'phone', 'district', 'upazila')
    readonly_fields = ('created_at', 'last_login')
    ordering = ('email',)


class DonationRequestAdmin(admin.ModelAdmin):
    list_display = ('requester_email', 'recipient_name', 'blood_group', 'hospital_name', 'status', 'donation_date')
    list_filter = ('status', 'blood_group', 'recipient_district')
    search_fields = ('requester_email', 'requester_name', 'recipient_name', 'hospital_name')
    # status only moves through the API so the transition rules apply
    readonly_fields = ('requester_email', 'requester_name', 'status', 'donor_name', 'donor_email',
                       'created_at', 'updated_at')


class FundRecordAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'amount', 'date', 'external_session_id')
    search_fields = ('name', 'email', 'external_session_id')
    readonly_fields = ('name', 'email', 'amount', 'date', 'external_session_id')

    def has_delete_permission(self, request, obj=None):
        return False


admin.site.register(Account, AccountAdmin)
admin.site.register(DonationRequest, DonationRequestAdmin)
admin.site.register(FundRecord, FundRecordAdmin)

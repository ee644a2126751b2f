# ===============================================
# users/admin.py
# ===============================================
from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import ReadOnlyPasswordHashField
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import Company, User


# ------------------------------------------------------
# Forms for the email based user model
# ------------------------------------------------------
class UserCreationForm(forms.ModelForm):
    password1 = forms.CharField(label="Password", widget=forms.PasswordInput)
    password2 = forms.CharField(label="Password confirmation", widget=forms.PasswordInput)

    class Meta:
        model = User
        fields = ("email", "full_name", "company", "role")

    def clean_password2(self):
        password1 = self.cleaned_data.get("password1")
        password2 = self.cleaned_data.get("password2")
        if password1 and password2 and password1 != password2:
            raise forms.ValidationError("Passwords don't match.")
        return password2

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password1"])
        if commit:
            user.save()
        return user


class UserChangeForm(forms.ModelForm):
    password = ReadOnlyPasswordHashField()

    class Meta:
        model = User
        fields = "__all__"


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("company_code", "company_name", "establishment_date", "is_active", "user_count", "created_at")
    list_filter = ("is_active",)
    search_fields = ("company_code", "company_name")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("company_name",)

    def user_count(self, obj):
        return obj.users.count()
    user_count.short_description = "Users"


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Custom Django admin configuration for the User model."""

    form = UserChangeForm
    add_form = UserCreationForm

    list_display = (
        "email",
        "full_name",
        "company",
        "colored_role",
        "department",
        "position",
        "is_active",
        "is_staff",
        "last_login",
    )
    list_filter = ("role", "company", "is_active", "is_staff", "is_superuser")
    search_fields = ("email", "full_name", "department", "company__company_name", "company__company_code")
    ordering = ("email",)
    list_per_page = 25
    readonly_fields = ("created_at", "updated_at", "last_login")

    fieldsets = (
        (_("Login Info"), {"fields": ("email", "password")}),
        (_("Personal Info"), {"fields": ("full_name", "company", "department", "position", "hire_date", "avatar_url")}),
        (_("Role & Access"), {"fields": ("role", "is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        (_("System Info"), {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "full_name", "company", "role", "password1", "password2", "is_active"),
            },
        ),
    )

    def colored_role(self, obj):
        color = "green" if obj.role == User.ROLE_ADMIN else "blue"
        return format_html("<b><span style='color:{}'>{}</span></b>", color, obj.get_role_display())
    colored_role.short_description = "Role"

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company")

# ===========================================================
# users/models.py
# ===========================================================

import string

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models
from django.utils.crypto import get_random_string


COMPANY_CODE_CHARS = string.ascii_uppercase + string.digits


# ===========================================================
# COMPANY (TENANT)
# ===========================================================
class Company(models.Model):
    """
    A tenant. Every user, evaluation setting and record belongs
    to exactly one company.
    """

    company_code = models.CharField(
        max_length=12,
        unique=True,
        db_index=True,
        validators=[RegexValidator(r"^[A-Z0-9]+$", "Company code must be upper-case letters and digits.")],
        help_text="Code staff enter when registering (e.g. AB12CD).",
    )
    company_name = models.CharField(max_length=255)
    establishment_date = models.DateField(
        null=True,
        blank=True,
        help_text="Drives fiscal period numbering (period 1 starts in this month).",
    )
    is_active = models.BooleanField(default=True)
    settings = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["company_name"]
        verbose_name = "Company"
        verbose_name_plural = "Companies"

    def __str__(self):
        return f"{self.company_name} ({self.company_code})"

    @classmethod
    def generate_code(cls):
        """Random unused company code."""
        length = getattr(settings, "COMPANY_CODE_LENGTH", 6)
        while True:
            code = get_random_string(length, allowed_chars=COMPANY_CODE_CHARS)
            if not cls.objects.filter(company_code=code).exists():
                return code

    def save(self, *args, **kwargs):
        if not self.company_code:
            self.company_code = self.generate_code()
        self.company_code = self.company_code.upper()
        super().save(*args, **kwargs)

    # ------------------------------------------------------
    # Membership helpers
    # ------------------------------------------------------
    @property
    def admins(self):
        return self.users.filter(role=User.ROLE_ADMIN, is_active=True)

    @property
    def staff_members(self):
        return self.users.filter(role=User.ROLE_STAFF, is_active=True)


# ===========================================================
# USER MANAGER
# ===========================================================
class UserManager(BaseUserManager):
    """Email based user manager."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Users must have an email address.")

        email = self.normalize_email(email).lower()
        extra_fields.setdefault("is_active", True)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ROLE_ADMIN)

        if not password:
            raise ValueError("Superuser must have a password.")

        return self.create_user(email, password=password, **extra_fields)


# ===========================================================
# USER MODEL
# ===========================================================
class User(AbstractBaseUser, PermissionsMixin):
    """
    Staff evaluation user. Admins score staff; staff receive evaluations.
    """

    ROLE_ADMIN = "admin"
    ROLE_STAFF = "staff"
    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_STAFF, "Staff"),
    ]

    # ---------- CORE ----------
    email = models.EmailField(unique=True, db_index=True)
    full_name = models.CharField(max_length=150)

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_STAFF,
        db_index=True,
    )

    # ---------- ORGANIZATION ----------
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="users",
        help_text="Tenant the user belongs to. Empty only for site superusers.",
    )
    department = models.CharField(max_length=100, blank=True, default="")
    position = models.CharField(max_length=100, blank=True, default="")
    hire_date = models.DateField(null=True, blank=True)
    avatar_url = models.URLField(max_length=500, blank=True, default="")

    # ---------- DJANGO FLAGS ----------
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False, help_text="Django admin site access.")

    # ---------- AUDIT ----------
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["full_name"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["full_name", "email"]
        indexes = [
            models.Index(fields=["company", "role", "is_active"]),
        ]

    def __str__(self):
        return f"{self.full_name} <{self.email}>" if self.full_name else self.email

    def clean(self):
        super().clean()
        if self.role not in dict(self.ROLE_CHOICES):
            raise ValidationError({"role": "Role must be admin or staff."})
        if not self.is_superuser and not self.company_id:
            raise ValidationError({"company": "Users must belong to a company."})

    def get_full_name(self):
        return self.full_name or self.email

    def get_short_name(self):
        return self.full_name.split(" ")[0] if self.full_name else self.email

    # ======================================================
    # ROLE HELPERS
    # ======================================================
    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_staff_member(self):
        return self.role == self.ROLE_STAFF

    def same_company(self, other):
        return bool(self.company_id) and self.company_id == getattr(other, "company_id", None)

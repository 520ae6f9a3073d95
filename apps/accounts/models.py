from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import secrets
import uuid


class UserRole(models.TextChoices):
    INSTALLER = 'installer', 'Installer'
    ADMIN = 'admin', 'Admin'


class InstallerStatus(models.TextChoices):
    PENDING = 'pending', 'Pending approval'
    APPROVED = 'approved', 'Approved'
    SUSPENDED = 'suspended', 'Suspended'


def generate_loyalty_card_id():
    return f"SX{secrets.token_hex(4).upper()}"


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)
        extra_fields.setdefault('status', InstallerStatus.APPROVED)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Program member: an installer registering serials, or an administrator."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    city = models.CharField(max_length=100, blank=True)

    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.INSTALLER)
    status = models.CharField(
        max_length=20,
        choices=InstallerStatus.choices,
        default=InstallerStatus.PENDING,
        db_index=True,
    )
    loyalty_card_id = models.CharField(
        max_length=16,
        unique=True,
        default=generate_loyalty_card_id,
        editable=False,
    )
    average_rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('5'))],
    )

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_4b85f2_idx'),
            models.Index(fields=['role', 'status'], name='users_role_6a1f0e_idx'),
            models.Index(fields=['created_at'], name='users_created_6541e9_idx'),
        ]

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        if self.role == UserRole.ADMIN:
            self.is_staff = True
        super().save(*args, **kwargs)

    def get_display_name(self):
        """Return display name or email prefix."""
        return self.display_name or self.email.split('@')[0]

    @property
    def is_installer(self):
        return self.role == UserRole.INSTALLER

    @property
    def is_program_admin(self):
        return self.role == UserRole.ADMIN or self.is_staff

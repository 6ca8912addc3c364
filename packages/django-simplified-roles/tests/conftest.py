"""Pytest configuration for django-simplified-roles tests."""
import django
import pytest
from django.conf import settings


def pytest_configure():
    """Configure Django settings for pytest."""
    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key-not-for-production',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'django_simplified_roles',
                'tests',
            ],
            AUTH_USER_MODEL='tests.User',
            AUTHENTICATION_BACKENDS=[
                'django_simplified_roles.backends.SimplifiedRolesBackend',
                'django.contrib.auth.backends.ModelBackend',
            ],
            SIMPLIFIED_ROLES_AUTO_INSTALL=False,
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
        )
    django.setup()


@pytest.fixture
def catalog(db):
    """Database-backed catalog with the simplified role set installed."""
    from django_simplified_roles.catalog import RoleCatalog

    catalog = RoleCatalog()
    catalog.install()
    return catalog


@pytest.fixture
def memory_store():
    """Empty in-memory role store."""
    from django_simplified_roles.stores import MemoryRoleStore

    return MemoryRoleStore()


@pytest.fixture
def memory_catalog(memory_store):
    """In-memory catalog seeded with the factory role set."""
    from django_simplified_roles.catalog import RoleCatalog

    catalog = RoleCatalog(store=memory_store)
    catalog.seed_default_roles()
    return catalog


def _user_with_role(username, role):
    from tests.models import User

    user = User.objects.create_user(username=username, password='pass')
    if role:
        user.assign_role(role)
    return user


@pytest.fixture
def developer(catalog):
    """User with the administrator role ("Developer")."""
    return _user_with_role('developer', 'administrator')


@pytest.fixture
def other_developer(catalog):
    return _user_with_role('developer2', 'administrator')


@pytest.fixture
def staff(catalog):
    """User with the editor role ("Staff")."""
    return _user_with_role('staff', 'editor')


@pytest.fixture
def other_staff(catalog):
    return _user_with_role('staff2', 'editor')


@pytest.fixture
def basic_user(catalog):
    """User with the subscriber role ("Basic User")."""
    return _user_with_role('basic', 'subscriber')


@pytest.fixture
def superuser(catalog):
    from tests.models import User

    return User.objects.create_superuser(username='root', email='root@test.com', password='pass')

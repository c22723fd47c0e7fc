"""Pytest configuration and fixtures"""
import os
import tempfile

import pytest

_TMP_DIR = tempfile.mkdtemp(prefix="mirakle-tests-")

# Set test environment variables before the app is imported
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["MEDIA_ROOT"] = os.path.join(_TMP_DIR, "media")
os.environ.setdefault("SECRET_KEY", "test_secret")
os.environ["ADMIN_EMAILS"] = "admin@mirakle.in"
os.environ["EMAIL_BACKEND"] = "console"
os.environ["CONTACT_INBOX"] = "shop@mirakle.in"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ["GOOGLE_MAPS_API_KEY"] = "test_maps_key"

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.models.user import Base, SessionLocal, User, engine  # noqa: E402
# Registers the remaining tables on Base.metadata
from app.models import address, banner, cart, contact  # noqa: E402,F401
from app.models.product import Product, ProductVariant  # noqa: E402
from app.utils.security import create_access_token, hash_password  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    def _make(email="user@mirakle.in", password="secret123", name="Test User", role="USER"):
        user = User(name=name, email=email, password=hash_password(password), role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def sample_user(make_user):
    return make_user()


@pytest.fixture
def admin_user(make_user):
    return make_user(email="admin@mirakle.in", name="Admin")


def bearer(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=user.email)}"}


@pytest.fixture
def headers_for():
    return bearer


@pytest.fixture
def auth_headers(sample_user):
    return bearer(sample_user)


@pytest.fixture
def admin_headers(admin_user):
    return bearer(admin_user)


@pytest.fixture
def sample_product(db):
    """Product with two variants"""
    product = Product(
        title="Cotton Kurta",
        description="Hand-woven cotton kurta",
        product_type="Clothing",
        category="Kurtas",
        keywords=["kurta", "cotton"],
        images=[],
        variants=[
            ProductVariant(size="M", color="Blue", price=799, stock=10, sku="KUR-M-BLU"),
            ProductVariant(size="L", color="Blue", price=849, stock=5, sku="KUR-L-BLU"),
        ],
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product

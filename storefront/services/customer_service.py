# storefront/services/customer_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.customer import CustomerModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import CustomerCreate, CustomerUpdate, PaginationParams
from storefront.repos.cart_repo import CartRepo
from storefront.repos.customer_repo import CustomerRepo
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger
from storefront.utils.security import hash_password, verify_password

logger = get_logger(__name__)


class CustomerService:
    def __init__(self, db: Session):
        self.repo = CustomerRepo(db)
        self.carts = CartRepo(db)
        self.orders = OrderRepo(db)

    def get_customer(self, customer_id: int) -> CustomerModel:
        customer = self.repo.get_customer(customer_id)
        if not customer:
            raise NotFoundError(f"Customer with ID {customer_id} not found")
        return customer

    def list_customers(self, params: PaginationParams) -> Dict[str, Any]:
        return self.repo.list_customers(params)

    def find_by_name(self, first_name: str, last_name: str) -> List[CustomerModel]:
        return self.repo.find_by_name(first_name, last_name)

    def create_customer(self, payload: CustomerCreate) -> CustomerModel:
        email = payload.email.strip().lower()
        if self.repo.get_by_email(email):
            raise ConflictError(f"Customer with email '{email}' already exists")

        data = payload.model_dump(exclude={"password"})
        data["email"] = email
        data["first_name"] = payload.first_name.strip()
        data["last_name"] = payload.last_name.strip()

        created = self.repo.create_customer(
            CustomerModel(password_hash=hash_password(payload.password), **data)
        )
        logger.info(f"Created customer {created.id}")
        return created

    def update_customer(self, customer_id: int, payload: CustomerUpdate) -> CustomerModel:
        customer = self.get_customer(customer_id)
        data = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}

        if "email" in data:
            data["email"] = data["email"].strip().lower()
            existing = self.repo.get_by_email(data["email"])
            if existing and existing.id != customer.id:
                raise ConflictError(f"Customer with email '{data['email']}' already exists")

        return self.repo.update_customer(customer, data)

    def authenticate(self, email: str, password: str) -> CustomerModel:
        customer = self.repo.get_by_email(email)
        if not customer or not verify_password(password, customer.password_hash):
            logger.warning("Failed login attempt")
            raise ValidationFailed("Invalid credentials")
        return customer

    def change_password(self, customer_id: int, current_password: str, new_password: str) -> None:
        customer = self.get_customer(customer_id)
        if not verify_password(current_password, customer.password_hash):
            raise ValidationFailed("Current password is incorrect")

        self.repo.update_customer(customer, {"password_hash": hash_password(new_password)})
        logger.info(f"Password changed for customer {customer_id}")

    def delete_customer(self, customer_id: int) -> None:
        customer = self.get_customer(customer_id)

        if self.orders.count_by_customer(customer_id):
            raise ConflictError(f"Customer with ID {customer_id} has orders and cannot be deleted")
        if self.carts.get_by_customer_id(customer_id):
            raise ConflictError(f"Customer with ID {customer_id} still owns a cart")

        self.repo.delete_customer(customer)
        logger.info(f"Deleted customer {customer_id}")

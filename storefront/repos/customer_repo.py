# storefront/repos/customer_repo.py
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.customer import CustomerModel
from storefront.domain.schemas import PaginationParams
from storefront.repos.pagination import paginate


class CustomerRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_customer(self, customer_id: int) -> CustomerModel | None:
        return self.db.get(CustomerModel, customer_id)

    def get_by_email(self, email: str) -> CustomerModel | None:
        return self.db.execute(
            select(CustomerModel).where(CustomerModel.email == email.strip().lower())
        ).scalar_one_or_none()

    def find_by_name(self, first_name: str, last_name: str) -> List[CustomerModel]:
        return list(
            self.db.scalars(
                select(CustomerModel)
                .where(
                    func.lower(CustomerModel.first_name) == first_name.strip().lower(),
                    func.lower(CustomerModel.last_name) == last_name.strip().lower(),
                )
                .order_by(CustomerModel.id)
            ).all()
        )

    def list_customers(self, params: PaginationParams) -> Dict[str, Any]:
        return paginate(self.db, select(CustomerModel), CustomerModel, params)

    def create_customer(self, customer: CustomerModel) -> CustomerModel:
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def update_customer(self, customer: CustomerModel, data: Dict[str, Any]) -> CustomerModel:
        for field, value in data.items():
            setattr(customer, field, value)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def delete_customer(self, customer: CustomerModel) -> None:
        self.db.delete(customer)
        self.db.commit()

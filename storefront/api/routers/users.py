from fastapi import APIRouter, Depends, HTTPException
from storefront.api.deps import get_customer_repo
from storefront.domain.errors import RegistrationError
from storefront.domain.schemas import CustomerCreate, CustomerRead
from storefront.repos.user_repo import CustomerRepo
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

@router.post("/", response_model=CustomerRead, status_code=201)
def create_user(payload: CustomerCreate, customers: CustomerRepo = Depends(get_customer_repo)):
    service = UserService(customers)
    try:
        return service.create_user(payload)
    except RegistrationError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/{customer_id}", response_model=CustomerRead)
def get_user(customer_id: str, customers: CustomerRepo = Depends(get_customer_repo)):
    service = UserService(customers)
    try:
        return service.get_user(customer_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

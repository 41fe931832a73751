from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, func
from app.db.base import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    mobile = Column(String(20), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # --- Profile ---
    first_name = Column(String(100), nullable=True)
    application_no = Column(String(50), nullable=True)
    phone = Column(String(20), nullable=True)
    relation = Column(String(100), nullable=True)
    permanent_address = Column(String(500), nullable=True)
    temporary_address = Column(String(500), nullable=True)
    dob = Column(Date, nullable=True)
    photo = Column(String(500), nullable=True, doc="object store URL")
    license_file = Column(String(500), nullable=True, doc="object store URL")

    # --- Licensing ---
    class_of_vehicle = Column(String(50), nullable=True)
    date_of_enrolment = Column(Date, nullable=True)
    learners_license_no = Column(String(50), nullable=True)
    expiry_of_ll = Column(Date, nullable=True)
    main_test_date = Column(Date, nullable=True)

    # --- Billing / attendance ---
    total_fee = Column(Numeric(12, 2), nullable=True, server_default="0")
    paid_fee = Column(Numeric(12, 2), nullable=True, server_default="0")
    fee_discount = Column(Numeric(12, 2), nullable=True, server_default="0")
    total_classes = Column(Integer, nullable=True, server_default="0")
    classes_attended = Column(Integer, nullable=True, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Client(mobile={self.mobile}, name={self.first_name})>"

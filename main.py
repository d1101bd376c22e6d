from fastapi import FastAPI
from database import connect_to_mongo, close_mongo
from specialty.routes import router as specialty_router
from insurance.routes import router as insurance_router
from doctor.routes import router as doctor_router
from appointment.routes import router as appointment_router
from booking.routes import router as booking_router
from admin.routes import router as admin_router
from fastapi.middleware.cors import CORSMiddleware
import config
import logging

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title="Clinic Scheduling")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins (for development); replace with specific origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    app.state.repository = await connect_to_mongo()


@app.on_event("shutdown")
async def shutdown():
    close_mongo(app.state.repository)

# All Routes Endpoint Setup
app.include_router(specialty_router, prefix="/api", tags=["specialty"])
app.include_router(insurance_router, prefix="/api", tags=["insurance"])
app.include_router(doctor_router, prefix="/api", tags=["doctor"])
app.include_router(appointment_router, prefix="/api", tags=["appointment"])
app.include_router(booking_router, prefix="/api", tags=["booking"])
app.include_router(admin_router, prefix="/api", tags=["admin"])

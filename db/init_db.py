"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_database
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Police stations: the scope that owns FIR numbers
CREATE TABLE IF NOT EXISTS police_stations (
    id                  SERIAL PRIMARY KEY,
    station_code        VARCHAR(20) UNIQUE NOT NULL,
    station_name        VARCHAR(150) NOT NULL,
    state               VARCHAR(100),
    district            VARCHAR(100),
    municipality        VARCHAR(100),
    contact_number      VARCHAR(30),
    address             TEXT,
    created_at          TIMESTAMPTZ DEFAULT NOW(),
    updated_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Officers attached to a station
CREATE TABLE IF NOT EXISTS officers (
    id                  SERIAL PRIMARY KEY,
    badge_number        VARCHAR(30) UNIQUE NOT NULL,
    first_name          VARCHAR(100) NOT NULL,
    middle_name         VARCHAR(100),
    last_name           VARCHAR(100) NOT NULL,
    rank                VARCHAR(50) NOT NULL,
    station_id          INT NOT NULL REFERENCES police_stations(id),
    service_status      VARCHAR(20) DEFAULT 'Active'
                        CHECK (service_status IN ('Active', 'Inactive', 'Retired', 'Suspended')),
    created_at          TIMESTAMPTZ DEFAULT NOW(),
    updated_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Application users, linked to their Telegram account
CREATE TABLE IF NOT EXISTS users (
    id                  SERIAL PRIMARY KEY,
    username            VARCHAR(100) UNIQUE NOT NULL,
    telegram_id         BIGINT UNIQUE,
    role                VARCHAR(20) NOT NULL CHECK (role IN ('Admin', 'StationAdmin', 'Officer')),
    station_id          INT REFERENCES police_stations(id),
    officer_id          INT REFERENCES officers(id),
    is_active           BOOLEAN DEFAULT TRUE,
    last_login          TIMESTAMPTZ,
    created_at          TIMESTAMPTZ DEFAULT NOW(),
    updated_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Persons involved in cases
CREATE TABLE IF NOT EXISTS persons (
    id                  SERIAL PRIMARY KEY,
    first_name          VARCHAR(100) NOT NULL,
    middle_name         VARCHAR(100),
    last_name           VARCHAR(100) NOT NULL,
    national_id         VARCHAR(50) UNIQUE,
    gender              VARCHAR(10) CHECK (gender IN ('Male', 'Female', 'Other')),
    contact_number      VARCHAR(30),
    city                VARCHAR(100),
    state               VARCHAR(100),
    created_at          TIMESTAMPTZ DEFAULT NOW(),
    updated_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Cases: fir_no is unique across all stations and all years
CREATE TABLE IF NOT EXISTS cases (
    case_id             SERIAL PRIMARY KEY,
    fir_no              VARCHAR(50) UNIQUE NOT NULL,
    fir_date_time       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    station_id          INT NOT NULL REFERENCES police_stations(id),
    officer_id          INT REFERENCES officers(id),
    crime_type          VARCHAR(100) NOT NULL,
    crime_section       VARCHAR(100),
    incident_date_time  TIMESTAMPTZ NOT NULL,
    incident_location   TEXT,
    incident_district   VARCHAR(100),
    case_priority       VARCHAR(20) DEFAULT 'Medium'
                        CHECK (case_priority IN ('Low', 'Medium', 'High', 'Critical')),
    case_status         VARCHAR(30) DEFAULT 'Registered',
    summary             TEXT,
    created_at          TIMESTAMPTZ DEFAULT NOW(),
    updated_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Persons linked to a case with their role in it
CREATE TABLE IF NOT EXISTS case_persons (
    id                  SERIAL PRIMARY KEY,
    case_id             INT NOT NULL REFERENCES cases(case_id) ON DELETE CASCADE,
    person_id           INT NOT NULL REFERENCES persons(id),
    role                VARCHAR(20) NOT NULL
                        CHECK (role IN ('Complainant', 'Accused', 'Suspect', 'Witness', 'Victim')),
    statement           TEXT,
    added_date          TIMESTAMPTZ DEFAULT NOW()
);

-- Audit trail of case actions
CREATE TABLE IF NOT EXISTS fir_track_records (
    id                  SERIAL PRIMARY KEY,
    case_id             INT NOT NULL REFERENCES cases(case_id) ON DELETE CASCADE,
    action_type         VARCHAR(50) NOT NULL,
    action_description  TEXT,
    old_status          VARCHAR(30),
    new_status          VARCHAR(30),
    performed_by_user_id INT REFERENCES users(id),
    action_date         TIMESTAMPTZ DEFAULT NOW()
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_cases_station_fir_date ON cases(station_id, fir_date_time);
CREATE INDEX IF NOT EXISTS idx_case_persons_person ON case_persons(person_id);
CREATE INDEX IF NOT EXISTS idx_track_records_case ON fir_track_records(case_id);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    get_database().execute(SCHEMA_SQL)
    logger.info("Database schema initialized successfully.")


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")

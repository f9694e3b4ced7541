"""
PostgreSQL schema for locations and cached resources.
"""

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS locations (
    id SERIAL PRIMARY KEY,
    search_query VARCHAR(255) NOT NULL,
    formatted_query VARCHAR(255),
    latitude DOUBLE PRECISION,
    longitude DOUBLE PRECISION,
    CONSTRAINT uq_locations_search_query UNIQUE (search_query)
);

CREATE TABLE IF NOT EXISTS weathers (
    id SERIAL PRIMARY KEY,
    forecast TEXT,
    time VARCHAR(255),
    created_at BIGINT NOT NULL,
    location_id INTEGER NOT NULL REFERENCES locations (id)
);

CREATE TABLE IF NOT EXISTS yelps (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255),
    image_url TEXT,
    price VARCHAR(16),
    rating DOUBLE PRECISION,
    url TEXT,
    created_at BIGINT NOT NULL,
    location_id INTEGER NOT NULL REFERENCES locations (id)
);

CREATE TABLE IF NOT EXISTS meetups (
    id SERIAL PRIMARY KEY,
    link TEXT,
    name VARCHAR(255),
    creation_date VARCHAR(255),
    host VARCHAR(255),
    created_at BIGINT NOT NULL,
    location_id INTEGER NOT NULL REFERENCES locations (id)
);

CREATE TABLE IF NOT EXISTS movies (
    id SERIAL PRIMARY KEY,
    title VARCHAR(255),
    overview TEXT,
    average_votes DOUBLE PRECISION,
    total_votes INTEGER,
    image_url TEXT,
    popularity DOUBLE PRECISION,
    released_on VARCHAR(255),
    created_at BIGINT NOT NULL,
    location_id INTEGER NOT NULL REFERENCES locations (id)
);

CREATE TABLE IF NOT EXISTS trails (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255),
    location VARCHAR(255),
    length DOUBLE PRECISION,
    stars DOUBLE PRECISION,
    star_votes INTEGER,
    summary TEXT,
    trail_url TEXT,
    conditions TEXT,
    condition_date VARCHAR(255),
    condition_time VARCHAR(255),
    created_at BIGINT NOT NULL,
    location_id INTEGER NOT NULL REFERENCES locations (id)
);

CREATE INDEX IF NOT EXISTS idx_weathers_location ON weathers (location_id);
CREATE INDEX IF NOT EXISTS idx_yelps_location ON yelps (location_id);
CREATE INDEX IF NOT EXISTS idx_meetups_location ON meetups (location_id);
CREATE INDEX IF NOT EXISTS idx_movies_location ON movies (location_id);
CREATE INDEX IF NOT EXISTS idx_trails_location ON trails (location_id);
"""

"""
Sample UCDF strings, one per common kind of data source.
"""

from __future__ import annotations

SAMPLES: dict[str, str] = {
    "csv": (
        "t=file.csv;c.path=/data/users.csv;c.encoding=utf-8;"
        "s.fields=id:int,name:str,email:str,created_at:date;a=r;m.desc=User data file"
    ),
    "postgresql": (
        "t=db.postgresql;c.host=localhost;c.port=5432;c.db=myapp;c.user=postgres;"
        "c.password=secret;s.fields=id:int,name:str,email:str;a=rw;m.desc=PostgreSQL database"
    ),
    "rest": (
        "t=api.rest;c.url=\"https://api.example.com\";c.auth.type=bearer;c.auth.token=xyz123;"
        "s.endpoints=/users:GET,/users:POST,/users/{id}:GET,/users/{id}:PUT,/users/{id}:DELETE;"
        "a=rw;m.desc=REST API for user management"
    ),
    "kafka": (
        "t=stream.kafka;c.brokers=\"broker1:9092,broker2:9092\";c.topic=events;"
        "c.group_id=consumer_group_1;s.format=json;"
        "s.fields=event_id:str,timestamp:datetime,payload:json;a=r;m.desc=Kafka event stream"
    ),
    "mongodb": (
        "t=db.mongodb;c.uri=\"mongodb://localhost:27017\";c.db=myapp;"
        "s.fields=_id:str,name:str,data:json;a=rw;m.desc=MongoDB database"
    ),
    "iot": (
        "t=iot.mqtt;c.broker=\"tcp://sensors.local:1883\";c.topic=plant/+/temperature;"
        "s.format=json;s.fields=device_id:str,reading:float,ts:datetime;a=r;m.desc=Plant sensors"
    ),
}

ALIASES: dict[str, str] = {
    "db": "postgresql",
    "api": "rest",
    "stream": "kafka",
    "mqtt": "iot",
}


def sample_names() -> list[str]:
    return sorted([*SAMPLES, *ALIASES])


def get_sample(name: str) -> str:
    """Sample UCDF string by name or alias; ``KeyError`` if unknown."""
    return SAMPLES[ALIASES.get(name, name)]

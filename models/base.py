from sqlalchemy.orm import declarative_base
from sqlalchemy import event
from core.id_generator import TYPE_PREFIX, generate_random_id

# Shared Base for all models
Base = declarative_base()


@event.listens_for(Base, "before_insert", propagate=True)
def assign_random_id(mapper, connection, target):
    entity = target.__tablename__
    if entity in TYPE_PREFIX and getattr(target, "id", None) is None:
        target.id = generate_random_id(entity)

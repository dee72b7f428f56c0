from classschema.domain import AbstractEntity, AbstractValueObject


class Hybrid(AbstractEntity, AbstractValueObject):
    pass

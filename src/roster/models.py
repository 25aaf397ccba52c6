COMPETITION_STATUSES = ("draft", "active", "registration_closed", "completed")


class Participant:
    def __init__(self, id, name, district, competition_id=None, registration_date=None):
        self.id = id
        self.name = name
        self.district = district
        self.competition_id = competition_id
        self.registration_date = registration_date

    @classmethod
    def from_dict(cls, data):
        """Build a participant from a plain mapping (YAML / JSON payloads)."""
        if not isinstance(data, dict):
            raise ValueError(f"Participant entry must be a mapping, got {type(data).__name__}")
        missing = [key for key in ('id', 'name', 'district') if data.get(key) in (None, '')]
        if missing:
            raise ValueError(f"Participant entry is missing {', '.join(missing)}")
        return cls(
            id=str(data['id']),
            name=str(data['name']).strip(),
            district=str(data['district']).strip(),
            competition_id=data.get('competition_id'),
            registration_date=data.get('registration_date'),
        )

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'district': self.district}

    def __repr__(self):
        return f"Participant(id={self.id}, name={self.name}, district={self.district})"


class Competition:
    def __init__(self, id, name, date=None, address=None, organized_by=None,
                 age_category=None, weight_category=None, status="draft"):
        if status not in COMPETITION_STATUSES:
            raise ValueError(f"Unknown competition status: {status}")
        self.id = id
        self.name = name
        self.date = date
        self.address = address
        self.organized_by = organized_by
        self.age_category = age_category
        self.weight_category = weight_category
        self.status = status

    def __repr__(self):
        return f"Competition(id={self.id}, name={self.name}, status={self.status})"

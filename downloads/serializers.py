# downloads/serializers.py

from collections.abc import Mapping

from django.core.validators import ProhibitNullCharactersValidator
from rest_framework import serializers
from rest_framework.validators import ProhibitSurrogateCharactersValidator


class WireCharField(serializers.CharField):
    """
    CharField that takes any JSON string as is.

    DRF rejects NUL and lone surrogates outright, which would fail the
    whole manifest for one odd name. Names are cleaned per entry when the
    archive path is built.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("default", "")
        kwargs.setdefault("allow_blank", True)
        kwargs.setdefault("allow_null", True)
        kwargs.setdefault("trim_whitespace", False)
        super().__init__(**kwargs)
        self.validators = [
            v for v in self.validators
            if not isinstance(v, (ProhibitNullCharactersValidator, ProhibitSurrogateCharactersValidator))
        ]


# =============================
# MANIFEST ENTRY (wire shape)
# =============================

class ManifestEntrySerializer(serializers.Serializer):
    """
    One object of the stored manifest array:

        {"FileName": "a1.jpg", "Folder": "Level 1/Level 2",
         "S3Path": "1/p23216.tf_....a1.jpg", "FileId": "4170",
         "ProjectId": "23216", "ProjectName": "Superman",
         "Modified": "2015-07-18T02:05:04Z"}

    Producers are not consistent about key casing ("modified"), so keys
    are matched case-insensitively. Anything else is ignored.
    """

    FileName = WireCharField()
    Folder = WireCharField()
    S3Path = WireCharField()
    FileId = serializers.IntegerField(default=0, allow_null=True)
    ProjectId = serializers.IntegerField(default=0, allow_null=True)
    ProjectName = WireCharField()
    Modified = WireCharField()

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            data = self._canonical_keys(data)
        return super().to_internal_value(data)

    def _canonical_keys(self, data):
        names = {name.lower(): name for name in self.fields}
        canonical = {}

        for key, value in data.items():
            name = names.get(str(key).lower())
            if name is None:
                continue
            # an exact match wins over a case-folded one
            if name in canonical and key != name:
                continue
            canonical[name] = value

        return canonical

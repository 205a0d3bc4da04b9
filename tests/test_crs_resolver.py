import unittest
from unittest.mock import MagicMock, patch

from pyproj import CRS
from pyproj.exceptions import ProjError

from Service.topo_modules.crs import (
    CoordinateReferenceResolver,
    authority_code,
    crs_from_code,
    epsg_4326,
    epsg_authority_string,
)
from Service.topo_modules.errors import CrsQueryFailure, InvalidCrsAuthority, InvalidParameter, TopoError

TOKYO = (139.6917, 35.6895)


class UtmZoneQueryTests(unittest.TestCase):
    def setUp(self):
        self.resolver = CoordinateReferenceResolver(MagicMock())

    def test_tokyo_wgs84_zone(self):
        self.assertIn(32654, self.resolver.query_utm_zone(*TOKYO, datum="WGS84"))

    def test_tokyo_datum_zone(self):
        self.assertIn(3095, self.resolver.query_utm_zone(*TOKYO, datum="Tokyo"))

    def test_nad83_has_no_zone_in_japan(self):
        self.assertEqual(self.resolver.query_utm_zone(*TOKYO, datum="NAD83"), [])

    def test_nad83_zone_in_oklahoma(self):
        self.assertIn(26914, self.resolver.query_utm_zone(-98.26, 35.58, datum="NAD83"))

    def test_without_datum_returns_every_utm_datum(self):
        codes = self.resolver.query_utm_zone(*TOKYO)
        self.assertIn(32654, codes)
        self.assertIn(3095, codes)

    def test_only_utm_systems_are_returned(self):
        for code in self.resolver.query_utm_zone(*TOKYO):
            self.assertIn("UTM zone", CRS.from_epsg(code).name)

    def test_database_failure_is_reported_as_query_failure(self):
        with patch(
            "Service.topo_modules.crs.resolver.query_crs_info",
            side_effect=ProjError("proj.db 열기 실패"),
        ):
            with self.assertRaises(CrsQueryFailure) as ctx:
                self.resolver.query_utm_zone(*TOKYO, datum="WGS84")

        self.assertIsInstance(ctx.exception, TopoError)
        self.assertIsInstance(ctx.exception.__cause__, ProjError)


class UtmProjDefinitionTests(unittest.TestCase):
    def test_zone_number_and_letter(self):
        self.assertEqual(CoordinateReferenceResolver.utm_zone_number_and_letter(*TOKYO), (54, "S"))
        self.assertEqual(CoordinateReferenceResolver.utm_zone_number_and_letter(-180.0, -80.0), (1, "C"))
        self.assertEqual(CoordinateReferenceResolver.utm_zone_number_and_letter(179.9, 84.0), (60, "X"))

    def test_zone_letter_outside_latitude_bands_raises(self):
        with self.assertRaises(InvalidParameter):
            CoordinateReferenceResolver.utm_zone_number_and_letter(0.0, 85.0)

    def test_northern_definition(self):
        self.assertEqual(
            CoordinateReferenceResolver.build_utm_proj_definition(54, "S"),
            "+proj=utm +zone=54 +datum=WGS84 +units=m +no_defs",
        )
        self.assertNotIn("+south", CoordinateReferenceResolver.build_utm_proj_definition(31, "P"))

    def test_equator_band_is_treated_as_southern(self):
        self.assertIn("+south", CoordinateReferenceResolver.build_utm_proj_definition(31, "N"))
        self.assertIn("+south", CoordinateReferenceResolver.build_utm_proj_definition(31, "C"))

    def test_datum_is_substituted(self):
        self.assertIn("+datum=NAD83", CoordinateReferenceResolver.build_utm_proj_definition(14, "S", "NAD83"))

    def test_invalid_zone_letter_or_number_raises(self):
        with self.assertRaises(InvalidParameter):
            CoordinateReferenceResolver.build_utm_proj_definition(54, "Y")
        with self.assertRaises(InvalidParameter):
            CoordinateReferenceResolver.build_utm_proj_definition(0, "S")
        with self.assertRaises(InvalidParameter):
            CoordinateReferenceResolver.build_utm_proj_definition(61, "S")


class AuthorityHelperTests(unittest.TestCase):
    def test_authority_string(self):
        self.assertEqual(epsg_authority_string(4326), "EPSG:4326")

    def test_epsg_4326(self):
        self.assertEqual(authority_code(epsg_4326()), 4326)

    def test_custom_crs_has_no_authority_code(self):
        custom = CRS.from_proj4("+proj=tmerc +lat_0=12.3 +lon_0=101.234 +k=0.9123 +x_0=12345 +y_0=67890 +ellps=GRS80 +units=m +no_defs")
        with self.assertRaises(InvalidCrsAuthority):
            authority_code(custom)

    def test_unknown_code_raises(self):
        with self.assertRaises(InvalidCrsAuthority):
            crs_from_code(999999)


if __name__ == "__main__":
    unittest.main()

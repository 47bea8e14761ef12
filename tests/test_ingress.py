from __future__ import annotations

import pytest
import yaml

from endfield.create_manifests import create_ingress_manifest, get_ingress_route_yaml
from endfield.models import IngressRoute
from endfield.routes import parse_ingress_route


def make_route(**overrides) -> IngressRoute:
    values = dict(
        route_id="k3j5h2g1x9q8w7e6",
        field_id="helm-ingress-nginx",
        target_namespace="apps",
        target_service="web",
        target_port_number=8080,
        host="shop.example.com",
        path="/",
        path_type="Prefix",
        ingress_class_name="nginx",
        ingress_name="ef-route-k3j5h2g1",
        ingress_namespace="apps",
    )
    values.update(overrides)
    return IngressRoute(**values)


class TestIngressManifest:
    def test_identity_labels_and_annotations(self):
        manifest = create_ingress_manifest(make_route(annotations=[("nginx.ingress.kubernetes.io/rewrite-target", "/")]))

        expected = {
            "app.kubernetes.io/managed-by": "endfield",
            "endfield.io/fieldId": "helm-ingress-nginx",
            "endfield.io/routeId": "k3j5h2g1x9q8w7e6",
        }
        assert manifest["apiVersion"] == "networking.k8s.io/v1"
        assert manifest["kind"] == "Ingress"
        assert manifest["metadata"]["name"] == "ef-route-k3j5h2g1"
        assert manifest["metadata"]["namespace"] == "apps"
        assert manifest["metadata"]["labels"] == expected
        assert manifest["metadata"]["annotations"] == expected | {"nginx.ingress.kubernetes.io/rewrite-target": "/"}

    def test_rule(self):
        spec = create_ingress_manifest(make_route())["spec"]

        assert spec["ingressClassName"] == "nginx"
        assert spec["rules"] == [{
            "host": "shop.example.com",
            "http": {"paths": [{
                "path": "/",
                "pathType": "Prefix",
                "backend": {"service": {"name": "web", "port": {"number": 8080}}},
            }]},
        }]
        assert "tls" not in spec

    def test_host_omitted_when_null(self):
        rule = create_ingress_manifest(make_route(host=None))["spec"]["rules"][0]

        assert "host" not in rule

    @pytest.mark.parametrize("overrides,port", [
        ({"target_port_number": None, "target_port_name": "http"}, {"name": "http"}),
        ({"target_port_number": None}, {"number": 80}),
    ])
    def test_backend_port(self, overrides, port):
        rule = create_ingress_manifest(make_route(**overrides))["spec"]["rules"][0]

        assert rule["http"]["paths"][0]["backend"]["service"]["port"] == port

    def test_tls_requires_secret_and_hosts(self):
        assert "tls" not in create_ingress_manifest(make_route(tls_secret="web-tls"))["spec"]
        assert "tls" not in create_ingress_manifest(make_route(tls_secret="web-tls", tls_hosts=[]))["spec"]

        spec = create_ingress_manifest(make_route(tls_secret="web-tls", tls_hosts=["shop.example.com"]))["spec"]
        assert spec["tls"] == [{"hosts": ["shop.example.com"], "secretName": "web-tls"}]

    def test_yaml_is_loadable(self):
        route = make_route()

        assert yaml.safe_load(get_ingress_route_yaml(route)) == create_ingress_manifest(route)

    def test_port_number_and_name_are_exclusive(self):
        with pytest.raises(ValueError):
            make_route(target_port_number=80, target_port_name="http")

    def test_annotations_cannot_replace_identity(self):
        route = make_route(annotations=[("endfield.io/routeId", "other-id"), ("endfield.io/fieldId", "other-field")])

        annotations = create_ingress_manifest(route)["metadata"]["annotations"]

        assert annotations["endfield.io/routeId"] == "k3j5h2g1x9q8w7e6"
        assert annotations["endfield.io/fieldId"] == "helm-ingress-nginx"

        parsed = parse_ingress_route(get_ingress_route_yaml(route), "r.yaml")
        assert parsed.route_id == "k3j5h2g1x9q8w7e6"
        assert parsed.field_id == "helm-ingress-nginx"
        assert parsed.annotations is None

    def test_long_values_are_not_wrapped(self):
        value = "a " * 100
        text = get_ingress_route_yaml(make_route(annotations=[("example.com/long", value.strip())]))

        assert f"example.com/long: {value.strip()}\n" in text


class TestIngressScanner:
    @pytest.mark.parametrize("overrides", [
        {},
        {"host": None},
        {"target_port_number": None, "target_port_name": "http"},
        {"path": "/api", "path_type": "Exact"},
        {"tls_secret": "web-tls", "tls_hosts": ["shop.example.com", "www.example.com"]},
        {"annotations": [("nginx.ingress.kubernetes.io/rewrite-target", "/")]},
        {"annotations": [("nginx.ingress.kubernetes.io/configuration-snippet",
            'more_set_headers "X-Frame-Options: DENY"; more_set_headers "X-Content-Type-Options: nosniff"; '
            'more_set_headers "Referrer-Policy: no-referrer";')]},
        {"annotations": [("nginx.ingress.kubernetes.io/server-snippet", "location /healthz {\n  return 200;\n}\n")]},
        {"annotations": [("nginx.ingress.kubernetes.io/auth-snippet", "proxy_set_header X-Auth 1;\nproxy_set_header X-Org 2;")]},
        {"annotations": [("example.com/note", "it's: quoted"), ("example.com/retries", "3"), ("example.com/sticky", "true")]},
        {"ingress_class_name": "traefik"},
    ])
    def test_round_trip(self, overrides):
        route = make_route(**overrides)

        parsed = parse_ingress_route(get_ingress_route_yaml(route), "routes/ef-route-k3j5h2g1.yaml")

        assert parsed == route

    def test_default_port_reads_back_as_80(self):
        route = make_route(target_port_number=None)

        parsed = parse_ingress_route(get_ingress_route_yaml(route), "r.yaml")

        assert parsed is not None
        assert parsed.target_port_number == 80
        assert parsed.target_port_name is None

    def test_route_id_that_looks_numeric(self):
        route = make_route(route_id="12345678", ingress_name="ef-route-12345678")

        parsed = parse_ingress_route(get_ingress_route_yaml(route), "r.yaml")

        assert parsed is not None
        assert parsed.route_id == "12345678"

    def test_hand_indented_manifest(self):
        text = """\
apiVersion: networking.k8s.io/v1
kind: Ingress
metadata:
  name: ef-route-abc12345
  namespace: web
  annotations:
    endfield.io/routeId: "abc12345xyz"
    endfield.io/fieldId: "helm-ingress"
    cert-manager.io/cluster-issuer: letsencrypt
spec:
  ingressClassName: nginx
  tls:
    - hosts:
        - shop.example.com
      secretName: shop-tls
  rules:
    - host: "shop.example.com"
      http:
        paths:
          - path: /api
            pathType: Exact
            backend:
              service:
                name: api
                port:
                  name: http
"""
        route = parse_ingress_route(text, "hand.yaml")

        assert route is not None
        assert route.route_id == "abc12345xyz"
        assert route.field_id == "helm-ingress"
        assert route.ingress_name == "ef-route-abc12345"
        assert route.ingress_namespace == "web"
        assert route.target_namespace == "web"
        assert route.target_service == "api"
        assert route.target_port_number is None
        assert route.target_port_name == "http"
        assert route.host == "shop.example.com"
        assert route.path == "/api"
        assert route.path_type == "Exact"
        assert route.tls_secret == "shop-tls"
        assert route.tls_hosts == ["shop.example.com"]
        assert route.annotations == [("cert-manager.io/cluster-issuer", "letsencrypt")]

    def test_identity_comes_from_labels(self):
        text = """\
metadata:
  annotations:
    endfield.io/fieldId: helm-ingress
    endfield.io/routeId: other-id
  labels:
    endfield.io/fieldId: helm-ingress
    endfield.io/routeId: abc12345xyz
  name: ef-route-abc12345
  namespace: web
spec:
  rules:
  - http:
      paths:
      - backend:
          service:
            name: api
            port:
              number: 8080
"""
        route = parse_ingress_route(text, "r.yaml")

        assert route is not None
        assert route.route_id == "abc12345xyz"
        assert route.annotations is None

    def test_wrapped_annotation_value(self):
        text = """\
metadata:
  annotations:
    endfield.io/fieldId: helm-ingress
    endfield.io/routeId: abc12345xyz
    nginx.ingress.kubernetes.io/configuration-snippet: 'more_set_headers "X-Frame-Options:
      DENY"; more_set_headers "Referrer-Policy: no-referrer";'
    nginx.ingress.kubernetes.io/proxy-body-size: 8m
  name: ef-route-abc12345
  namespace: web
spec:
  rules:
  - host: shop.example.com
"""
        route = parse_ingress_route(text, "r.yaml")

        assert route.annotations == [
            ("nginx.ingress.kubernetes.io/configuration-snippet",
                'more_set_headers "X-Frame-Options: DENY"; more_set_headers "Referrer-Policy: no-referrer";'),
            ("nginx.ingress.kubernetes.io/proxy-body-size", "8m"),
        ]
        assert route.host == "shop.example.com"

    def test_annotation_text_does_not_leak_into_spec(self):
        route = make_route(annotations=[("nginx.ingress.kubernetes.io/server-snippet", "host: evil.example.com\npath: /admin\n")])

        parsed = parse_ingress_route(get_ingress_route_yaml(route), "r.yaml")

        assert parsed == route

    def test_foreign_ingress_is_ignored(self):
        text = """\
apiVersion: networking.k8s.io/v1
kind: Ingress
metadata:
  name: grafana
  namespace: monitoring
spec:
  rules:
  - host: grafana.example.com
"""
        assert parse_ingress_route(text, "foreign.yaml") is None

    def test_one_tag_is_not_enough(self):
        text = "metadata:\n  annotations:\n    endfield.io/routeId: abc\n"

        assert parse_ingress_route(text, "half.yaml") is None

    @pytest.mark.parametrize("text", ["", "::: not yaml :::", "kind: Deployment\n"])
    def test_garbage_yields_none(self, text):
        assert parse_ingress_route(text, "junk.yaml") is None

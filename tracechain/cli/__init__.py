"""
TraceChain CLI Tool

This module provides a command-line interface for a running TraceChain API
server. It can start the server, create products, record supply chain
events, register participants, and display traces and authenticity verdicts.
"""

import json
import sys

import click
import httpx

from tracechain.config.settings import get_settings
from tracechain.core.models import EventType, ParticipantRole


def _client(ctx: click.Context) -> httpx.Client:
    """HTTP client for the configured server (injectable through ctx.obj['client'])"""
    if ctx.obj.get('client') is None:
        ctx.obj['client'] = httpx.Client(base_url=ctx.obj['base_url'], timeout=ctx.obj['timeout'])
    return ctx.obj['client']


def _request(ctx: click.Context, method: str, path: str, **kwargs) -> httpx.Response:
    """Send a request and abort with the server's message on failure"""
    try:
        response = _client(ctx).request(method, f"/api/v1{path}", **kwargs)
    except httpx.HTTPError as e:
        click.echo(f"Error contacting server: {e}", err=True)
        sys.exit(2)

    if response.is_error:
        try:
            message = response.json().get("message", response.text)
        except ValueError:
            message = response.text
        click.echo(f"Error ({response.status_code}): {message}", err=True)
        sys.exit(1)
    return response


@click.group()
@click.option('--base-url', default=None, help='TraceChain API base URL')
@click.pass_context
def trc(ctx, base_url):
    """TraceChain CLI - supply chain traceability ledger client"""
    settings = get_settings()
    ctx.ensure_object(dict)
    ctx.obj.setdefault('base_url', base_url or settings.CLI_BASE_URL)
    ctx.obj.setdefault('timeout', settings.CLI_TIMEOUT)


@trc.command()
@click.option('--host', default=None, help='Bind host')
@click.option('--port', default=None, type=int, help='Bind port')
def serve(host, port):
    """Run the TraceChain API server"""
    from tracechain.api.server import run_server
    run_server(host=host, port=port)


@trc.command()
@click.option('--name', required=True, help='Product name')
@click.option('--description', default='', help='Product description')
@click.option('--manufacturer', required=True, help='Manufacturer name')
@click.option('--batch-number', required=True, help='Batch number')
@click.option('--ingredient', 'ingredients', multiple=True, help='Ingredient (repeatable)')
@click.option('--certification', 'certifications', multiple=True, help='Certification (repeatable)')
@click.pass_context
def create_product(ctx, name, description, manufacturer, batch_number, ingredients, certifications):
    """Create a product"""
    response = _request(ctx, "POST", "/products", json={
        "name": name,
        "description": description,
        "manufacturer": manufacturer,
        "batch_number": batch_number,
        "ingredients": list(ingredients),
        "certifications": list(certifications)
    })
    click.echo(response.json()["product_id"])


@trc.command()
@click.argument('product_id')
@click.argument('event_type', type=click.Choice([event_type.value for event_type in EventType]))
@click.option('--location', required=True, help='Where the event happened')
@click.option('--actor', required=True, help='Who performed the event')
@click.option('--details', default='', help='Free-text details')
@click.option('--lat', type=float, default=None, help='Latitude')
@click.option('--lng', type=float, default=None, help='Longitude')
@click.option('--temperature', type=float, default=None, help='Temperature reading')
@click.option('--humidity', type=float, default=None, help='Humidity reading')
@click.pass_context
def add_event(ctx, product_id, event_type, location, actor, details, lat, lng, temperature, humidity):
    """Record a supply chain event for a product"""
    if (lat is None) != (lng is None):
        raise click.UsageError("--lat and --lng must be given together")

    payload = {
        "product_id": product_id,
        "event_type": event_type,
        "location": location,
        "actor": actor,
        "details": details,
        "temperature": temperature,
        "humidity": humidity
    }
    if lat is not None:
        payload["coordinates"] = {"latitude": lat, "longitude": lng}

    response = _request(ctx, "POST", "/events", json=payload)
    click.echo(response.json()["event_id"])


@trc.command()
@click.option('--name', required=True, help='Participant name')
@click.option('--role', required=True, type=click.Choice([role.value for role in ParticipantRole]))
@click.option('--location', required=True, help='Participant location')
@click.option('--public-key', default='', help='Public key (stored as-is)')
@click.pass_context
def register_participant(ctx, name, role, location, public_key):
    """Register a supply chain participant"""
    response = _request(ctx, "POST", "/participants", json={
        "name": name,
        "role": role,
        "location": location,
        "public_key": public_key
    })
    click.echo(response.json()["participant_id"])


@trc.command()
@click.argument('product_id')
@click.pass_context
def show_product(ctx, product_id):
    """Show one product as JSON"""
    response = _request(ctx, "GET", f"/products/{product_id}")
    click.echo(json.dumps(response.json(), indent=2))


@trc.command()
@click.argument('product_id', required=False)
@click.option('--batch-number', default=None, help='Look the product up by batch number')
@click.pass_context
def show_trace(ctx, product_id, batch_number):
    """Show the event history of a product"""
    if bool(product_id) == bool(batch_number):
        raise click.UsageError("Give either PRODUCT_ID or --batch-number")

    path = f"/batches/{batch_number}/trace" if batch_number else f"/products/{product_id}/trace"
    trace = _request(ctx, "GET", path).json()

    click.echo(f"Trace of {trace['product_id']} ({len(trace['events'])} events):")
    for event in trace["events"]:
        click.echo(f"  - {event['timestamp']} | {event['event_type']} | {event['location']} | {event['actor']}")


@trc.command()
@click.argument('product_id')
@click.pass_context
def verify(ctx, product_id):
    """Check a product's authenticity; exit code 3 when not authentic"""
    verdict = _request(ctx, "GET", f"/products/{product_id}/verify").json()
    if verdict["authentic"]:
        click.echo(f"Product {product_id} is authentic ({verdict['event_count']} events in order)")
    else:
        click.echo(f"Product {product_id} is NOT authentic")
        sys.exit(3)


@trc.command()
@click.pass_context
def list_products(ctx):
    """List all products"""
    products = _request(ctx, "GET", "/products").json()
    if not products:
        click.echo("No products found")
        return
    for product in products:
        click.echo(f"  - {product['id']} | {product['name']} | batch {product['batch_number']}")


@trc.command()
@click.pass_context
def list_participants(ctx):
    """List all participants"""
    participants = _request(ctx, "GET", "/participants").json()
    if not participants:
        click.echo("No participants found")
        return
    for participant in participants:
        click.echo(f"  - {participant['id']} | {participant['name']} ({participant['role']})")


@trc.command()
@click.pass_context
def list_events(ctx):
    """List the events of every product"""
    events = _request(ctx, "GET", "/events").json()
    if not events:
        click.echo("No events found")
        return
    for event in events:
        click.echo(f"  - {event['id']} | {event['product_id']} | {event['event_type']} | {event['timestamp']}")


if __name__ == '__main__':
    trc()

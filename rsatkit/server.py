"""
rsatkit MCP server for listing and installing RSAT capabilities
"""
from mcp.server.fastmcp import FastMCP
import sys
import time
import traceback
import anyio
from .components import build_components
from .config import load_settings
from .errors import QueryError, ResolutionError
from .rsat_checker import environment_status, is_admin, is_windows

# Initialize FastMCP server
try:
    print("Starting MCP server initialization", file=sys.stderr)
    mcp = FastMCP("rsat_capabilities")
    print("FastMCP initialized", file=sys.stderr)
except Exception as e:
    print(f"Failed to initialize FastMCP: {str(e)}", file=sys.stderr)
    traceback.print_exc(file=sys.stderr)
    sys.exit(1)

settings = None
components = None


def get_components():
    """Build settings and components on first use."""
    global settings, components
    if components is None:
        print("Initializing capability components", file=sys.stderr)
        settings = load_settings()
        components = build_components(settings)
    return components


def _precondition_error(install=False):
    if not is_windows():
        return {"status": "error", "message": "RSAT capabilities can only be managed on Windows."}
    if install and not is_admin():
        return {"status": "error", "message": "Installing capabilities requires an elevated process."}
    return None


@mcp.tool()
def list_capabilities(pattern: str = None) -> dict:
    """
    List installable capabilities and their install state.

    Args:
        pattern: Case-insensitive substring of the capability id. Defaults to RSAT_FILTER.
    """
    print(f"Listing capabilities, pattern: {pattern}", file=sys.stderr)
    error = _precondition_error()
    if error:
        return error
    try:
        parts = get_components()
        snapshot = parts.inventory.fetch(settings.filter_pattern if pattern is None else pattern)
        return {"status": "success", "data": snapshot.to_list(), "count": len(snapshot)}
    except QueryError as e:
        return {"status": "error", "message": str(e)}
    except Exception as e:
        print(f"Error listing capabilities: {str(e)}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        return {"status": "error", "message": str(e)}


@mcp.tool()
def install_capability(selection: str, pattern: str = None) -> dict:
    """
    Install one capability.

    Args:
        selection: 1-based position in the list_capabilities output for the same
                   pattern, or the exact capability id
        pattern: The pattern used for list_capabilities. Defaults to RSAT_FILTER.
    """
    print(f"Installing capability, selection: {selection}, pattern: {pattern}", file=sys.stderr)
    error = _precondition_error(install=True)
    if error:
        return error
    try:
        parts = get_components()
        snapshot = parts.inventory.fetch(settings.filter_pattern if pattern is None else pattern)
        record = next((item for item in snapshot if item.id.lower() == selection.strip().lower()), None)
        if record is None:
            record = parts.resolver.resolve(snapshot, selection)

        start_time = time.time()
        outcome = parts.installer.install(record)
        elapsed = time.time() - start_time
        print(f"Install of {record.id} took {elapsed:.1f}s", file=sys.stderr)
        return {"status": "success" if outcome.ok else "error", "data": outcome.to_dict()}
    except ResolutionError as e:
        return {"status": "error", "message": str(e), "kind": e.kind.value}
    except QueryError as e:
        return {"status": "error", "message": str(e)}
    except anyio.BrokenResourceError:
        print("Client disconnected during install", file=sys.stderr)
        return {"status": "error", "message": "Client disconnected"}
    except Exception as e:
        print(f"Error installing capability {selection}: {str(e)}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        return {"status": "error", "message": str(e)}


@mcp.tool()
def install_all_capabilities(pattern: str = None) -> dict:
    """
    Install every matching capability that is not installed yet.

    Installs run one at a time in list order. A failed install does not stop
    the remaining ones; the per-capability results are in data.outcomes.
    """
    print(f"Installing all capabilities, pattern: {pattern}", file=sys.stderr)
    error = _precondition_error(install=True)
    if error:
        return error
    try:
        parts = get_components()
        snapshot = parts.inventory.fetch(settings.filter_pattern if pattern is None else pattern)
        report = parts.coordinator.run_all(snapshot)
        return {"status": "success" if report.all_succeeded else "error", "data": report.to_dict()}
    except QueryError as e:
        return {"status": "error", "message": str(e)}
    except anyio.BrokenResourceError:
        print("Client disconnected during batch install", file=sys.stderr)
        return {"status": "error", "message": "Client disconnected"}
    except Exception as e:
        print(f"Error installing capabilities: {str(e)}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        return {"status": "error", "message": str(e)}


@mcp.tool()
def check_environment() -> dict:
    """Report platform, elevation, PowerShell and connectivity status."""
    try:
        get_components()
        return {"status": "success", "data": environment_status(settings)}
    except Exception as e:
        print(f"Error checking environment: {str(e)}", file=sys.stderr)
        return {"status": "error", "message": str(e)}


# Run the server
if __name__ == "__main__":
    print("Starting MCP server loop", file=sys.stderr)
    mcp.run()
